"""
Servicio de dashboard: agregados de solo lectura sobre las demandas.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from jurisconnect.models.demanda import Demanda, DemandaStatus
from jurisconnect.schemas.dashboard import (
    CategoryCount,
    DashboardResponse,
    DashboardSummary,
    MonthlyPerformance,
)

MONTHS_WINDOW = 12
OPEN_STATUSES = (DemandaStatus.PENDING, DemandaStatus.IN_PROGRESS)


def _month_keys(today: date, months: int = MONTHS_WINDOW) -> list[str]:
    """Claves YYYY-MM de los últimos `months` meses, del más antiguo al actual."""
    first = today.replace(day=1)
    return [
        (first - relativedelta(months=offset)).strftime("%Y-%m")
        for offset in range(months - 1, -1, -1)
    ]


async def _get_summary(db: AsyncSession) -> DashboardSummary:
    result = await db.execute(
        select(
            Demanda.status,
            func.count(Demanda.id).label("count"),
            func.coalesce(func.sum(Demanda.proposed_value), 0).label("value"),
        ).group_by(Demanda.status)
    )
    by_status = {s.value: 0 for s in DemandaStatus}
    total_count = 0
    total_value = Decimal("0")
    open_value = Decimal("0")
    fulfilled_value = Decimal("0")

    for status, count, value in result.all():
        value = Decimal(str(value))
        by_status[status.value] = count
        total_count += count
        total_value += value
        if status in OPEN_STATUSES:
            open_value += value
        elif status == DemandaStatus.FULFILLED:
            fulfilled_value += value

    return DashboardSummary(
        total_demandas=total_count,
        by_status=by_status,
        total_proposed_value=total_value,
        open_value=open_value,
        fulfilled_value=fulfilled_value,
    )


async def _get_monthly_performance(
    db: AsyncSession, today: date
) -> list[MonthlyPerformance]:
    keys = _month_keys(today)
    window_start = today.replace(day=1) - relativedelta(months=MONTHS_WINDOW - 1)
    since = datetime(window_start.year, window_start.month, 1, tzinfo=timezone.utc)

    result = await db.execute(
        select(Demanda.created_at, Demanda.proposed_value).where(
            Demanda.created_at >= since
        )
    )

    # Agrupar en Python para no depender de funciones de fecha del motor.
    buckets = {key: [0, Decimal("0")] for key in keys}
    for created_at, value in result.all():
        key = created_at.strftime("%Y-%m")
        if key in buckets:
            buckets[key][0] += 1
            buckets[key][1] += Decimal(str(value or 0))

    return [
        MonthlyPerformance(month=key, count=count, proposed_value=value)
        for key, (count, value) in buckets.items()
    ]


async def _get_demand_types(db: AsyncSession) -> list[CategoryCount]:
    count_col = func.count(Demanda.id).label("count")
    result = await db.execute(
        select(Demanda.category, count_col)
        .where(Demanda.category.is_not(None), Demanda.category != "")
        .group_by(Demanda.category)
        .order_by(count_col.desc(), Demanda.category.asc())
    )
    return [CategoryCount(category=cat, count=count) for cat, count in result.all()]


async def get_dashboard(db: AsyncSession, today: date | None = None) -> DashboardResponse:
    """Resumen financiero, desempeño mensual y tipos de demanda."""
    today = today or datetime.now(timezone.utc).date()
    return DashboardResponse(
        summary=await _get_summary(db),
        monthly_performance=await _get_monthly_performance(db, today),
        demand_types=await _get_demand_types(db),
    )
