"""
Servicio de autenticación: login unificado sobre las tres tablas de
principales, registro de clientes y corresponsales, alta de admins
y perfil propio.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jurisconnect.auth.dependencies import TokenPayload
from jurisconnect.auth.jwt import access_token_ttl_seconds, create_access_token
from jurisconnect.config import get_settings
from jurisconnect.core.exceptions import (
    ConflictException,
    CredentialsException,
    NotFoundException,
)
from jurisconnect.core.security import hash_password, verify_password
from jurisconnect.models.principal import (
    Admin,
    Client,
    Correspondent,
    PrincipalRole,
)
from jurisconnect.schemas.auth import LoginRequest, LoginResponse, PrincipalLoginData
from jurisconnect.schemas.principal import (
    AdminCreate,
    ClientCreate,
    CorrespondentCreate,
    ProfileResponse,
    ProfileUpdate,
)

logger = logging.getLogger(__name__)
settings = get_settings()

Principal = Admin | Client | Correspondent

# ── Orden de búsqueda ────────────────────────────────
# El email es único por tabla, no globalmente. Si el mismo email existe
# en dos tablas gana la primera de esta lista (Admin → Client →
# Correspondent). Es una regla de negocio heredada, no un bug: no cambiar
# el orden sin revisar las cuentas afectadas.
LOOKUP_ORDER: tuple[type[Principal], ...] = (Admin, Client, Correspondent)

MODEL_BY_ROLE: dict[PrincipalRole, type[Principal]] = {
    PrincipalRole.ADMIN: Admin,
    PrincipalRole.CLIENT: Client,
    PrincipalRole.CORRESPONDENT: Correspondent,
}

INVALID_CREDENTIALS = "Email o contraseña incorrectos"


async def find_principal_by_email(db: AsyncSession, email: str) -> Principal | None:
    """Busca un principal activo por email siguiendo `LOOKUP_ORDER`."""
    for model in LOOKUP_ORDER:
        result = await db.execute(
            select(model).where(model.email == email, model.is_active.is_(True))
        )
        principal = result.scalar_one_or_none()
        if principal is not None:
            return principal
    return None


async def get_principal(
    db: AsyncSession, role: PrincipalRole, principal_id: int
) -> Principal | None:
    model = MODEL_BY_ROLE[role]
    result = await db.execute(select(model).where(model.id == principal_id))
    return result.scalar_one_or_none()


async def login(db: AsyncSession, data: LoginRequest) -> LoginResponse:
    """
    Autentica un principal con email y contraseña.
    Email desconocido y contraseña incorrecta producen el mismo error.
    """
    email = data.email.lower()
    principal = await find_principal_by_email(db, email)

    if principal is None:
        logger.warning("Login fallido: principal no encontrado para email=%s", email)
        raise CredentialsException(INVALID_CREDENTIALS)

    if not verify_password(data.password, principal.hashed_password):
        logger.warning(
            "Login fallido: contraseña incorrecta para %s id=%s",
            principal.role.value, principal.id,
        )
        raise CredentialsException(INVALID_CREDENTIALS)

    # Actualizar último login
    principal.last_login = datetime.now(timezone.utc)
    await db.flush()

    token = create_access_token(principal.id, principal.role, principal.email)

    return LoginResponse(
        access_token=token,
        expires_in=access_token_ttl_seconds(),
        principal=PrincipalLoginData(
            id=principal.id,
            name=principal.display_name,
            email=principal.email,
            role=principal.role,
        ),
    )


# ── Registro ─────────────────────────────────────────

async def _ensure_unique(
    db: AsyncSession,
    model: type[Principal],
    field: str,
    value: str,
    message: str,
    exclude_id: int | None = None,
) -> None:
    """Verifica unicidad de un campo dentro de la tabla de un tipo de principal."""
    column = getattr(model, field)
    query = select(model.id).where(column == value)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise ConflictException(message)


async def ensure_client_unique(
    db: AsyncSession, email: str, exclude_id: int | None = None
) -> None:
    await _ensure_unique(
        db, Client, "email", email,
        "Ya existe un cliente con ese email", exclude_id,
    )


async def ensure_correspondent_unique(
    db: AsyncSession, email: str, cpf: str, exclude_id: int | None = None
) -> None:
    await _ensure_unique(
        db, Correspondent, "email", email,
        "Ya existe un corresponsal con ese email", exclude_id,
    )
    if settings.CORRESPONDENT_UNIQUE_CPF:
        await _ensure_unique(
            db, Correspondent, "cpf", cpf,
            "Ya existe un corresponsal con ese CPF", exclude_id,
        )


async def ensure_admin_unique(
    db: AsyncSession, email: str, exclude_id: int | None = None
) -> None:
    await _ensure_unique(
        db, Admin, "email", email,
        "Ya existe un administrador con ese email", exclude_id,
    )


async def _insert_unique(db: AsyncSession, principal: Principal, message: str) -> None:
    """
    Inserta el principal. Si otra request registró el mismo email entre la
    verificación y el INSERT, el índice único lo rechaza: se responde 409.
    """
    db.add(principal)
    try:
        await db.flush()
    except IntegrityError:
        logger.warning("Alta concurrente rechazada por índice único: %s", principal)
        raise ConflictException(message)
    await db.refresh(principal)


async def register_client(db: AsyncSession, data: ClientCreate) -> Client:
    """Registra un nuevo cliente. No requiere autenticación."""
    email = data.email.lower()
    await ensure_client_unique(db, email)

    client = Client(
        full_name=data.full_name,
        office=data.office,
        phone=data.phone,
        email=email,
        hashed_password=hash_password(data.password),
    )
    await _insert_unique(db, client, "Ya existe un cliente con ese email")

    logger.info("Cliente registrado: id=%s email=%s", client.id, client.email)
    return client


async def register_correspondent(
    db: AsyncSession, data: CorrespondentCreate
) -> Correspondent:
    """Registra un nuevo corresponsal. No requiere autenticación."""
    email = data.email.lower()
    await ensure_correspondent_unique(db, email, data.cpf)

    correspondent = Correspondent(
        full_name=data.full_name,
        category=data.category,
        oab_number=data.oab_number,
        rg=data.rg,
        cpf=data.cpf,
        email=email,
        phone=data.phone,
        served_jurisdictions=data.served_jurisdictions,
        hashed_password=hash_password(data.password),
    )
    await _insert_unique(db, correspondent, "Ya existe un corresponsal con ese email")

    logger.info(
        "Corresponsal registrado: id=%s email=%s categoria=%s",
        correspondent.id, correspondent.email, correspondent.category.value,
    )
    return correspondent


async def create_admin(db: AsyncSession, data: AdminCreate) -> Admin:
    """Crea un administrador (solo otro admin o el script de bootstrap)."""
    email = data.email.lower()
    await ensure_admin_unique(db, email)

    admin = Admin(
        name=data.name,
        email=email,
        hashed_password=hash_password(data.password),
    )
    await _insert_unique(db, admin, "Ya existe un administrador con ese email")

    logger.info("Administrador creado: id=%s email=%s", admin.id, admin.email)
    return admin


# ── Perfil propio ────────────────────────────────────

def _to_profile(principal: Principal) -> ProfileResponse:
    return ProfileResponse(
        id=principal.id,
        role=principal.role,
        name=principal.display_name,
        email=principal.email,
        phone=getattr(principal, "phone", None),
        is_active=principal.is_active,
        created_at=principal.created_at,
    )


async def _load_self(db: AsyncSession, token: TokenPayload) -> Principal:
    principal = await get_principal(db, token.role, token.principal_id)
    if principal is None or not principal.is_active:
        raise NotFoundException("Usuario")
    return principal


async def get_profile(db: AsyncSession, token: TokenPayload) -> ProfileResponse:
    """Retorna los datos del principal autenticado."""
    return _to_profile(await _load_self(db, token))


async def update_profile(
    db: AsyncSession, token: TokenPayload, data: ProfileUpdate
) -> ProfileResponse:
    """Auto-actualización: nombre, teléfono y contraseña."""
    principal = await _load_self(db, token)

    if data.name is not None:
        if isinstance(principal, Admin):
            principal.name = data.name
        else:
            principal.full_name = data.name
    if data.phone is not None and hasattr(principal, "phone"):
        principal.phone = data.phone
    if data.password is not None:
        principal.hashed_password = hash_password(data.password)

    await db.flush()
    await db.refresh(principal)
    return _to_profile(principal)
