"""
Endpoints de gestión de administradores.
El primer admin se crea con `scripts/create_admin.py`.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jurisconnect.auth.dependencies import TokenPayload, require_permission
from jurisconnect.core.exceptions import ForbiddenException
from jurisconnect.database import get_db
from jurisconnect.models.principal import PrincipalRole
from jurisconnect.schemas.principal import (
    ActiveToggle,
    ActiveToggleResponse,
    AdminCreate,
    AdminResponse,
    AdminUpdate,
)
from jurisconnect.services import auth_service, principal_service

router = APIRouter()


@router.get("", response_model=list[AdminResponse])
async def list_admins(
    principal: TokenPayload = Depends(require_permission("admin", "read")),
    db: AsyncSession = Depends(get_db),
):
    return await principal_service.list_principals(db, PrincipalRole.ADMIN)


@router.post("", response_model=AdminResponse, status_code=201)
async def create_admin(
    data: AdminCreate,
    principal: TokenPayload = Depends(require_permission("admin", "create")),
    db: AsyncSession = Depends(get_db),
):
    return await auth_service.create_admin(db, data)


@router.get("/{admin_id}", response_model=AdminResponse)
async def get_admin(
    admin_id: int,
    principal: TokenPayload = Depends(require_permission("admin", "read")),
    db: AsyncSession = Depends(get_db),
):
    return await principal_service.get_principal_or_404(
        db, PrincipalRole.ADMIN, admin_id
    )


@router.put("/{admin_id}", response_model=AdminResponse)
async def update_admin(
    admin_id: int,
    data: AdminUpdate,
    principal: TokenPayload = Depends(require_permission("admin", "update")),
    db: AsyncSession = Depends(get_db),
):
    return await principal_service.update_admin(db, admin_id, data)


@router.patch("/{admin_id}/status", response_model=ActiveToggleResponse)
async def change_admin_status(
    admin_id: int,
    data: ActiveToggle,
    principal: TokenPayload = Depends(require_permission("admin", "change_status")),
    db: AsyncSession = Depends(get_db),
):
    """Activa o desactiva un administrador. Un admin no puede desactivarse a sí mismo."""
    if admin_id == principal.principal_id and not data.is_active:
        raise ForbiddenException("No puede desactivar su propia cuenta")
    return await principal_service.set_active(
        db, PrincipalRole.ADMIN, admin_id, data.is_active
    )
