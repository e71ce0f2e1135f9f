"""
Endpoints de demandas: creación, consulta, asignación, cambio de estado,
historial y anexos.
"""

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from jurisconnect.auth.dependencies import TokenPayload, require_permission
from jurisconnect.database import get_db
from jurisconnect.models.demanda import DemandaStatus
from jurisconnect.schemas.attachment import AttachmentResponse, AttachmentUploadResponse
from jurisconnect.schemas.demanda import (
    AuditLogResponse,
    DemandaAssign,
    DemandaCreate,
    DemandaResponse,
    DemandaStatusChange,
    DemandaUpdate,
)
from jurisconnect.services import attachment_service, demanda_service

router = APIRouter()


@router.post("", response_model=DemandaResponse, status_code=201)
async def create_demanda(
    data: DemandaCreate,
    principal: TokenPayload = Depends(require_permission("demanda", "create")),
    db: AsyncSession = Depends(get_db),
):
    """Crea una demanda en estado `pending`. Solo clientes."""
    return await demanda_service.create_demanda(db, principal, data)


@router.get("/mine", response_model=list[DemandaResponse])
async def list_my_demandas(
    status: DemandaStatus | None = Query(None, description="Filtrar por estado"),
    principal: TokenPayload = Depends(require_permission("demanda", "read")),
    db: AsyncSession = Depends(get_db),
):
    """
    Demandas del principal autenticado:

    - **admin** → todas
    - **client** → las que creó
    - **correspondent** → las que tiene asignadas
    """
    return await demanda_service.list_my_demandas(db, principal, status=status)


@router.get("/{demanda_id}", response_model=DemandaResponse)
async def get_demanda(
    demanda_id: int,
    principal: TokenPayload = Depends(require_permission("demanda", "read")),
    db: AsyncSession = Depends(get_db),
):
    """Detalle de una demanda (admin, cliente dueño o corresponsal asignado)."""
    return await demanda_service.get_demanda(db, demanda_id, principal)


@router.put("/{demanda_id}", response_model=DemandaResponse)
async def update_demanda(
    demanda_id: int,
    data: DemandaUpdate,
    principal: TokenPayload = Depends(require_permission("demanda", "update")),
    db: AsyncSession = Depends(get_db),
):
    """Edita los datos de la demanda. El cliente solo puede hacerlo mientras está pendiente."""
    return await demanda_service.update_demanda(db, demanda_id, principal, data)


@router.patch("/{demanda_id}/assign", response_model=DemandaResponse)
async def assign_demanda(
    demanda_id: int,
    data: DemandaAssign,
    principal: TokenPayload = Depends(require_permission("demanda", "assign")),
    db: AsyncSession = Depends(get_db),
):
    """Asigna un corresponsal y pasa la demanda a `in_progress`. Solo admin."""
    return await demanda_service.assign_demanda(db, demanda_id, principal, data)


@router.patch("/{demanda_id}/status", response_model=DemandaResponse)
async def change_demanda_status(
    demanda_id: int,
    data: DemandaStatusChange,
    principal: TokenPayload = Depends(require_permission("demanda", "change_status")),
    db: AsyncSession = Depends(get_db),
):
    """
    Cambia el estado de la demanda. Admin, o el corresponsal asignado.
    Se acepta cualquier estado del enum desde cualquier estado.
    """
    return await demanda_service.change_status(db, demanda_id, principal, data)


@router.get("/{demanda_id}/history", response_model=list[AuditLogResponse])
async def get_demanda_history(
    demanda_id: int,
    principal: TokenPayload = Depends(require_permission("demanda", "read")),
    db: AsyncSession = Depends(get_db),
):
    """Historial de auditoría de la demanda."""
    return await demanda_service.list_history(db, demanda_id, principal)


# ── Anexos ───────────────────────────────────────────

@router.post(
    "/{demanda_id}/attachments",
    response_model=AttachmentUploadResponse,
    status_code=201,
)
async def upload_attachment(
    demanda_id: int,
    file: UploadFile = File(...),
    principal: TokenPayload = Depends(require_permission("attachment", "create")),
    db: AsyncSession = Depends(get_db),
):
    """Adjunta un archivo (JPEG, PNG, PDF o Word, máx. 10 MB)."""
    attachment = await attachment_service.upload_attachment(
        db, demanda_id, principal, file
    )
    return AttachmentUploadResponse(
        attachment=AttachmentResponse.model_validate(attachment)
    )


@router.get("/{demanda_id}/attachments", response_model=list[AttachmentResponse])
async def list_attachments(
    demanda_id: int,
    principal: TokenPayload = Depends(require_permission("attachment", "read")),
    db: AsyncSession = Depends(get_db),
):
    """Lista los anexos de la demanda."""
    return await attachment_service.list_attachments(db, demanda_id, principal)
