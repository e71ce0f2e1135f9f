"""
Router principal de la API.
Agrupa todos los sub-routers.
"""

from fastapi import APIRouter

from jurisconnect.api.admins import router as admins_router
from jurisconnect.api.auth import router as auth_router
from jurisconnect.api.clients import router as clients_router
from jurisconnect.api.correspondents import router as correspondents_router
from jurisconnect.api.dashboard import router as dashboard_router
from jurisconnect.api.demandas import router as demandas_router

api_router = APIRouter()

api_router.include_router(
    auth_router,
    prefix="/auth",
    tags=["Autenticación"],
)

api_router.include_router(
    demandas_router,
    prefix="/demandas",
    tags=["Demandas"],
)

api_router.include_router(
    clients_router,
    prefix="/clients",
    tags=["Clientes"],
)

api_router.include_router(
    correspondents_router,
    prefix="/correspondents",
    tags=["Corresponsales"],
)

api_router.include_router(
    admins_router,
    prefix="/admins",
    tags=["Administradores"],
)

api_router.include_router(
    dashboard_router,
    prefix="/dashboard",
    tags=["Dashboard"],
)
