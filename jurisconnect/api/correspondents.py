"""
Endpoints de gestión de corresponsales (solo administradores).
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jurisconnect.auth.dependencies import TokenPayload, require_permission
from jurisconnect.database import get_db
from jurisconnect.models.principal import PrincipalRole
from jurisconnect.schemas.principal import (
    ActiveToggle,
    ActiveToggleResponse,
    CorrespondentCreate,
    CorrespondentResponse,
    CorrespondentUpdate,
)
from jurisconnect.services import auth_service, principal_service

router = APIRouter()


@router.get("", response_model=list[CorrespondentResponse])
async def list_correspondents(
    is_active: bool | None = Query(None, description="Filtrar por estado"),
    principal: TokenPayload = Depends(require_permission("correspondent", "read")),
    db: AsyncSession = Depends(get_db),
):
    return await principal_service.list_principals(
        db, PrincipalRole.CORRESPONDENT, is_active
    )


@router.post("", response_model=CorrespondentResponse, status_code=201)
async def create_correspondent(
    data: CorrespondentCreate,
    principal: TokenPayload = Depends(require_permission("correspondent", "create")),
    db: AsyncSession = Depends(get_db),
):
    return await auth_service.register_correspondent(db, data)


@router.get("/{correspondent_id}", response_model=CorrespondentResponse)
async def get_correspondent(
    correspondent_id: int,
    principal: TokenPayload = Depends(require_permission("correspondent", "read")),
    db: AsyncSession = Depends(get_db),
):
    return await principal_service.get_principal_or_404(
        db, PrincipalRole.CORRESPONDENT, correspondent_id
    )


@router.put("/{correspondent_id}", response_model=CorrespondentResponse)
async def update_correspondent(
    correspondent_id: int,
    data: CorrespondentUpdate,
    principal: TokenPayload = Depends(require_permission("correspondent", "update")),
    db: AsyncSession = Depends(get_db),
):
    return await principal_service.update_correspondent(db, correspondent_id, data)


@router.patch("/{correspondent_id}/status", response_model=ActiveToggleResponse)
async def change_correspondent_status(
    correspondent_id: int,
    data: ActiveToggle,
    principal: TokenPayload = Depends(require_permission("correspondent", "change_status")),
    db: AsyncSession = Depends(get_db),
):
    """Activa o desactiva un corresponsal. `is_active` debe ser un booleano JSON."""
    return await principal_service.set_active(
        db, PrincipalRole.CORRESPONDENT, correspondent_id, data.is_active
    )
