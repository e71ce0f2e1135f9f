"""
Endpoints de autenticación: login unificado, registro público y perfil propio.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jurisconnect.auth.dependencies import TokenPayload, get_current_principal
from jurisconnect.database import get_db
from jurisconnect.schemas.auth import LoginRequest, LoginResponse
from jurisconnect.schemas.principal import (
    ClientCreate,
    ClientResponse,
    CorrespondentCreate,
    CorrespondentResponse,
    ProfileResponse,
    ProfileUpdate,
)
from jurisconnect.services import auth_service

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Autentica un administrador, cliente o corresponsal con email y contraseña.
    Las tablas se consultan en orden admin → cliente → corresponsal.
    """
    return await auth_service.login(db, data)


@router.post("/clients/register", response_model=ClientResponse, status_code=201)
async def register_client(
    data: ClientCreate,
    db: AsyncSession = Depends(get_db),
):
    """Registro público de clientes. No requiere autenticación."""
    return await auth_service.register_client(db, data)


@router.post(
    "/correspondents/register",
    response_model=CorrespondentResponse,
    status_code=201,
)
async def register_correspondent(
    data: CorrespondentCreate,
    db: AsyncSession = Depends(get_db),
):
    """Registro público de corresponsales. El número de OAB es obligatorio para abogados."""
    return await auth_service.register_correspondent(db, data)


@router.get("/me", response_model=ProfileResponse)
async def get_me(
    principal: TokenPayload = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Retorna los datos del principal autenticado."""
    return await auth_service.get_profile(db, principal)


@router.put("/me", response_model=ProfileResponse)
async def update_me(
    data: ProfileUpdate,
    principal: TokenPayload = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Actualiza nombre, teléfono o contraseña del principal autenticado."""
    return await auth_service.update_profile(db, principal, data)
