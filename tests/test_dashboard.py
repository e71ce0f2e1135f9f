"""
Tests del dashboard de administración.
"""

from datetime import date
from decimal import Decimal

from jurisconnect.models.demanda import Demanda, DemandaStatus
from jurisconnect.services.dashboard_service import MONTHS_WINDOW, _month_keys


async def _seed(db_session, client_principal):
    db_session.add_all([
        Demanda(
            client_id=client_principal.id, title="A", description="a",
            category="audiencia", proposed_value=Decimal("100.00"),
            status=DemandaStatus.PENDING,
        ),
        Demanda(
            client_id=client_principal.id, title="B", description="b",
            category="audiencia", proposed_value=Decimal("200.00"),
            status=DemandaStatus.IN_PROGRESS,
        ),
        Demanda(
            client_id=client_principal.id, title="C", description="c",
            category="protocolo", proposed_value=Decimal("50.00"),
            status=DemandaStatus.FULFILLED,
        ),
        Demanda(
            client_id=client_principal.id, title="D", description="d",
            proposed_value=Decimal("75.00"),
            status=DemandaStatus.CANCELLED,
        ),
    ])
    await db_session.commit()


async def test_dashboard_summary(client, db_session, client_principal, admin_headers):
    await _seed(db_session, client_principal)

    resp = await client.get("/api/dashboard", headers=admin_headers)
    assert resp.status_code == 200
    summary = resp.json()["summary"]
    assert summary["total_demandas"] == 4
    assert summary["by_status"] == {
        "pending": 1,
        "in_progress": 1,
        "fulfilled": 1,
        "cancelled": 1,
    }
    assert Decimal(str(summary["total_proposed_value"])) == Decimal("425")
    assert Decimal(str(summary["open_value"])) == Decimal("300")
    assert Decimal(str(summary["fulfilled_value"])) == Decimal("50")


async def test_dashboard_monthly_and_types(client, db_session, client_principal, admin_headers):
    await _seed(db_session, client_principal)

    data = (await client.get("/api/dashboard", headers=admin_headers)).json()

    monthly = data["monthly_performance"]
    assert len(monthly) == MONTHS_WINDOW
    assert sum(m["count"] for m in monthly) == 4
    assert monthly[-1]["count"] == 4

    assert data["demand_types"] == [
        {"category": "audiencia", "count": 2},
        {"category": "protocolo", "count": 1},
    ]


async def test_dashboard_empty(client, admin_headers):
    data = (await client.get("/api/dashboard", headers=admin_headers)).json()
    assert data["summary"]["total_demandas"] == 0
    assert all(m["count"] == 0 for m in data["monthly_performance"])
    assert data["demand_types"] == []


def test_month_keys_cross_year_boundary():
    keys = _month_keys(date(2026, 3, 15))
    assert len(keys) == 12
    assert keys[0] == "2025-04"
    assert keys[-1] == "2026-03"
