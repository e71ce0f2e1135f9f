"""
Servicio de demandas: creación, consulta por rol, asignación de
corresponsal y cambio de estado.

Orden de validación en cada operación sobre una demanda existente:
    existencia (404) → permiso sobre el registro (403) → datos (400)
La creación valida los datos antes de persistir (no hay existencia que comprobar).

No hay token de concurrencia optimista: dos cambios simultáneos sobre la
misma demanda se resuelven como last-writer-wins en la base de datos.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from jurisconnect.auth.dependencies import TokenPayload
from jurisconnect.auth.ownership import (
    ensure_can_change_status,
    ensure_can_edit,
    ensure_can_view,
)
from jurisconnect.core.exceptions import (
    BadRequestException,
    ForbiddenException,
    NotFoundException,
)
from jurisconnect.models.audit_log import AuditAction, AuditLog
from jurisconnect.models.demanda import INITIAL_STATUS, Demanda, DemandaStatus
from jurisconnect.models.principal import Correspondent, PrincipalRole
from jurisconnect.schemas.demanda import (
    DemandaAssign,
    DemandaCreate,
    DemandaResponse,
    DemandaStatusChange,
    DemandaUpdate,
)
from jurisconnect.services import audit_service

logger = logging.getLogger(__name__)


# ── Helpers ──────────────────────────────────────────

def _load_options():
    """Carga eager de cliente y corresponsal para los nombres en la respuesta."""
    return [
        joinedload(Demanda.client),
        joinedload(Demanda.correspondent),
    ]


def _demanda_to_response(demanda: Demanda) -> DemandaResponse:
    return DemandaResponse(
        id=demanda.id,
        title=demanda.title,
        description=demanda.description,
        process_number=demanda.process_number,
        category=demanda.category,
        deadline=demanda.deadline,
        proposed_value=demanda.proposed_value,
        status=demanda.status,
        client_id=demanda.client_id,
        correspondent_id=demanda.correspondent_id,
        client_name=demanda.client.full_name if demanda.client else None,
        correspondent_name=(
            demanda.correspondent.full_name if demanda.correspondent else None
        ),
        created_at=demanda.created_at,
        updated_at=demanda.updated_at,
    )


async def _get_demanda_or_404(db: AsyncSession, demanda_id: int) -> Demanda:
    result = await db.execute(
        select(Demanda)
        .options(*_load_options())
        .where(Demanda.id == demanda_id)
        .execution_options(populate_existing=True)
    )
    demanda = result.scalar_one_or_none()
    if demanda is None:
        raise NotFoundException(detail="Demanda no encontrada")
    return demanda


async def get_visible_demanda(
    db: AsyncSession, demanda_id: int, principal: TokenPayload
) -> Demanda:
    """Retorna la demanda si existe y el principal puede verla."""
    demanda = await _get_demanda_or_404(db, demanda_id)
    ensure_can_view(principal, demanda)
    return demanda


# ── Operaciones ──────────────────────────────────────

async def create_demanda(
    db: AsyncSession,
    principal: TokenPayload,
    data: DemandaCreate,
) -> DemandaResponse:
    """Crea una demanda pendiente, sin corresponsal, propiedad del cliente."""
    if principal.role != PrincipalRole.CLIENT:
        raise ForbiddenException("Solo un cliente puede crear demandas")

    demanda = Demanda(
        title=data.title,
        description=data.description,
        process_number=data.process_number,
        category=data.category,
        deadline=data.deadline,
        proposed_value=data.proposed_value,
        status=INITIAL_STATUS,
        client_id=principal.principal_id,
        correspondent_id=None,
    )
    db.add(demanda)
    await db.flush()

    await audit_service.record(
        db,
        demanda_id=demanda.id,
        actor=principal,
        action=AuditAction.CREATION,
        details={"title": demanda.title},
    )

    demanda = await _get_demanda_or_404(db, demanda.id)
    return _demanda_to_response(demanda)


async def get_demanda(
    db: AsyncSession,
    demanda_id: int,
    principal: TokenPayload,
) -> DemandaResponse:
    """Detalle de una demanda: admin, cliente dueño o corresponsal asignado."""
    demanda = await get_visible_demanda(db, demanda_id, principal)
    return _demanda_to_response(demanda)


async def list_my_demandas(
    db: AsyncSession,
    principal: TokenPayload,
    status: DemandaStatus | None = None,
) -> list[DemandaResponse]:
    """
    Lista de demandas según el rol:
    admin → todas; cliente → las propias; corresponsal → las asignadas.
    """
    query = select(Demanda).options(*_load_options())

    if principal.role == PrincipalRole.CLIENT:
        query = query.where(Demanda.client_id == principal.principal_id)
    elif principal.role == PrincipalRole.CORRESPONDENT:
        query = query.where(Demanda.correspondent_id == principal.principal_id)
    elif principal.role != PrincipalRole.ADMIN:
        raise ForbiddenException("Perfil de usuario inválido")

    if status is not None:
        query = query.where(Demanda.status == status)

    result = await db.execute(
        query.order_by(Demanda.created_at.desc(), Demanda.id.desc())
    )
    return [_demanda_to_response(d) for d in result.scalars().unique().all()]


async def update_demanda(
    db: AsyncSession,
    demanda_id: int,
    principal: TokenPayload,
    data: DemandaUpdate,
) -> DemandaResponse:
    """Edita los datos descriptivos (admin, o cliente dueño mientras está pendiente)."""
    demanda = await _get_demanda_or_404(db, demanda_id)
    ensure_can_edit(principal, demanda)

    changes = {}
    for field, value in data.model_dump(exclude_unset=True).items():
        old_value = getattr(demanda, field)
        if value != old_value:
            changes[field] = {"from": old_value, "to": value}
            setattr(demanda, field, value)

    if not changes:
        return _demanda_to_response(demanda)

    await db.flush()

    await audit_service.record(
        db,
        demanda_id=demanda.id,
        actor=principal,
        action=AuditAction.UPDATE,
        details=changes,
    )

    demanda = await _get_demanda_or_404(db, demanda.id)
    return _demanda_to_response(demanda)


async def assign_demanda(
    db: AsyncSession,
    demanda_id: int,
    principal: TokenPayload,
    data: DemandaAssign,
) -> DemandaResponse:
    """
    Asigna un corresponsal. En un solo UPDATE fija `correspondent_id`
    y pasa la demanda a `in_progress`.
    """
    if principal.role != PrincipalRole.ADMIN:
        raise ForbiddenException("Solo un administrador puede asignar demandas")

    demanda = await _get_demanda_or_404(db, demanda_id)

    if data.correspondent_id is None:
        raise BadRequestException("El ID del corresponsal es obligatorio")

    result = await db.execute(
        select(Correspondent).where(
            Correspondent.id == data.correspondent_id,
            Correspondent.is_active.is_(True),
        )
    )
    if result.scalar_one_or_none() is None:
        raise NotFoundException(detail="Corresponsal no encontrado o inactivo")

    previous = {
        "correspondent_id": demanda.correspondent_id,
        "status": demanda.status,
    }
    demanda.correspondent_id = data.correspondent_id
    demanda.status = DemandaStatus.IN_PROGRESS
    await db.flush()

    await audit_service.record(
        db,
        demanda_id=demanda.id,
        actor=principal,
        action=AuditAction.ASSIGNMENT,
        details={
            "from": previous,
            "to": {
                "correspondent_id": data.correspondent_id,
                "status": DemandaStatus.IN_PROGRESS,
            },
        },
    )

    logger.info(
        "Demanda %s asignada a corresponsal %s por admin %s",
        demanda.id, data.correspondent_id, principal.principal_id,
    )
    demanda = await _get_demanda_or_404(db, demanda.id)
    return _demanda_to_response(demanda)


async def change_status(
    db: AsyncSession,
    demanda_id: int,
    principal: TokenPayload,
    data: DemandaStatusChange,
) -> DemandaResponse:
    """
    Cambia el estado de una demanda (admin o corresponsal asignado).

    No se valida el grafo de transiciones: cualquier valor del enum es
    aceptado desde cualquier estado, incluido volver a `pending`. La
    asignación no se toca, así que una demanda asignada puede quedar
    `pending` con corresponsal.
    """
    demanda = await _get_demanda_or_404(db, demanda_id)
    ensure_can_change_status(principal, demanda)

    if data.status is None:
        raise BadRequestException("El campo 'status' es obligatorio")

    old_status = demanda.status
    demanda.status = data.status
    await db.flush()

    await audit_service.record(
        db,
        demanda_id=demanda.id,
        actor=principal,
        action=AuditAction.STATUS_CHANGE,
        details={"from": old_status, "to": data.status},
    )

    demanda = await _get_demanda_or_404(db, demanda.id)
    return _demanda_to_response(demanda)


async def list_history(
    db: AsyncSession,
    demanda_id: int,
    principal: TokenPayload,
) -> list[AuditLog]:
    """Historial de auditoría de una demanda visible para el principal."""
    await get_visible_demanda(db, demanda_id, principal)
    return await audit_service.list_for_demanda(db, demanda_id)
