"""
Endpoints de gestión de clientes (solo administradores).
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jurisconnect.auth.dependencies import TokenPayload, require_permission
from jurisconnect.database import get_db
from jurisconnect.models.principal import PrincipalRole
from jurisconnect.schemas.principal import (
    ActiveToggle,
    ActiveToggleResponse,
    ClientCreate,
    ClientResponse,
    ClientUpdate,
)
from jurisconnect.services import auth_service, principal_service

router = APIRouter()


@router.get("", response_model=list[ClientResponse])
async def list_clients(
    is_active: bool | None = Query(None, description="Filtrar por estado"),
    principal: TokenPayload = Depends(require_permission("client", "read")),
    db: AsyncSession = Depends(get_db),
):
    return await principal_service.list_principals(db, PrincipalRole.CLIENT, is_active)


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    data: ClientCreate,
    principal: TokenPayload = Depends(require_permission("client", "create")),
    db: AsyncSession = Depends(get_db),
):
    return await auth_service.register_client(db, data)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: int,
    principal: TokenPayload = Depends(require_permission("client", "read")),
    db: AsyncSession = Depends(get_db),
):
    return await principal_service.get_principal_or_404(
        db, PrincipalRole.CLIENT, client_id
    )


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    data: ClientUpdate,
    principal: TokenPayload = Depends(require_permission("client", "update")),
    db: AsyncSession = Depends(get_db),
):
    return await principal_service.update_client(db, client_id, data)


@router.patch("/{client_id}/status", response_model=ActiveToggleResponse)
async def change_client_status(
    client_id: int,
    data: ActiveToggle,
    principal: TokenPayload = Depends(require_permission("client", "change_status")),
    db: AsyncSession = Depends(get_db),
):
    """Activa o desactiva un cliente. `is_active` debe ser un booleano JSON."""
    return await principal_service.set_active(
        db, PrincipalRole.CLIENT, client_id, data.is_active
    )
