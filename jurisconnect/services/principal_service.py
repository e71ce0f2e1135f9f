"""
Gestión de clientes, corresponsales y administradores por parte de un admin.
Nunca se borra un principal: solo se activa o desactiva.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jurisconnect.core.exceptions import NotFoundException
from jurisconnect.models.principal import Admin, Client, Correspondent, PrincipalRole
from jurisconnect.schemas.principal import (
    ActiveToggleResponse,
    AdminUpdate,
    ClientUpdate,
    CorrespondentUpdate,
)
from jurisconnect.services.auth_service import (
    MODEL_BY_ROLE,
    ensure_admin_unique,
    ensure_client_unique,
    ensure_correspondent_unique,
)

logger = logging.getLogger(__name__)

RESOURCE_NAMES = {
    PrincipalRole.ADMIN: "Administrador",
    PrincipalRole.CLIENT: "Cliente",
    PrincipalRole.CORRESPONDENT: "Corresponsal",
}


async def get_principal_or_404(db: AsyncSession, role: PrincipalRole, principal_id: int):
    model = MODEL_BY_ROLE[role]
    result = await db.execute(select(model).where(model.id == principal_id))
    principal = result.scalar_one_or_none()
    if principal is None:
        raise NotFoundException(RESOURCE_NAMES[role])
    return principal


async def list_principals(
    db: AsyncSession,
    role: PrincipalRole,
    is_active: bool | None = None,
) -> list:
    """Lista principales de un tipo, ordenados por nombre."""
    model = MODEL_BY_ROLE[role]
    name_column = model.name if model is Admin else model.full_name
    query = select(model)
    if is_active is not None:
        query = query.where(model.is_active.is_(is_active))
    result = await db.execute(query.order_by(name_column.asc()))
    return list(result.scalars().all())


async def update_client(db: AsyncSession, client_id: int, data: ClientUpdate) -> Client:
    client = await get_principal_or_404(db, PrincipalRole.CLIENT, client_id)
    changes = data.model_dump(exclude_unset=True)
    if "email" in changes and changes["email"] is not None:
        changes["email"] = changes["email"].lower()
        await ensure_client_unique(db, changes["email"], exclude_id=client_id)

    for field, value in changes.items():
        if value is not None:
            setattr(client, field, value)

    await db.flush()
    await db.refresh(client)
    return client


async def update_correspondent(
    db: AsyncSession, correspondent_id: int, data: CorrespondentUpdate
) -> Correspondent:
    correspondent = await get_principal_or_404(db, PrincipalRole.CORRESPONDENT, correspondent_id)
    email = data.email.lower()
    await ensure_correspondent_unique(db, email, data.cpf, exclude_id=correspondent_id)

    for field, value in data.model_dump().items():
        setattr(correspondent, field, value)
    correspondent.email = email

    await db.flush()
    await db.refresh(correspondent)
    return correspondent


async def update_admin(db: AsyncSession, admin_id: int, data: AdminUpdate) -> Admin:
    admin = await get_principal_or_404(db, PrincipalRole.ADMIN, admin_id)
    if data.email is not None:
        email = data.email.lower()
        await ensure_admin_unique(db, email, exclude_id=admin_id)
        admin.email = email
    if data.name is not None:
        admin.name = data.name

    await db.flush()
    await db.refresh(admin)
    return admin


async def set_active(
    db: AsyncSession,
    role: PrincipalRole,
    principal_id: int,
    is_active: bool,
) -> ActiveToggleResponse:
    """Activa o desactiva (soft) un principal."""
    principal = await get_principal_or_404(db, role, principal_id)
    principal.is_active = is_active
    await db.flush()

    logger.info(
        "%s id=%s %s", role.value, principal_id,
        "activado" if is_active else "desactivado",
    )
    return ActiveToggleResponse(
        id=principal_id,
        is_active=is_active,
        message=f"Estado de {RESOURCE_NAMES[role].lower()} {principal_id} actualizado correctamente",
    )
