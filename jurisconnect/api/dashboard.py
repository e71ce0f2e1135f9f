"""
Endpoint del dashboard financiero (solo administradores).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jurisconnect.auth.dependencies import TokenPayload, require_permission
from jurisconnect.database import get_db
from jurisconnect.schemas.dashboard import DashboardResponse
from jurisconnect.services import dashboard_service

router = APIRouter()


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    principal: TokenPayload = Depends(require_permission("dashboard", "read")),
    db: AsyncSession = Depends(get_db),
):
    """Resumen por estado, desempeño de los últimos 12 meses y tipos de demanda."""
    return await dashboard_service.get_dashboard(db)
