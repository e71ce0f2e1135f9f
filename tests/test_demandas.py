"""
Tests del ciclo de vida de la demanda: creación, asignación, cambio de
estado, visibilidad por rol, edición e historial.
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from jurisconnect.auth.dependencies import TokenPayload
from jurisconnect.core.exceptions import ForbiddenException
from jurisconnect.models.demanda import Demanda
from jurisconnect.schemas.demanda import DemandaCreate
from jurisconnect.services import demanda_service
from tests.utils import NEW_DEMANDA, auth_headers


async def _count_demandas(db_session) -> int:
    result = await db_session.execute(select(func.count(Demanda.id)))
    return result.scalar_one()


async def _assign(client, demanda_id, correspondent_id, headers):
    return await client.patch(
        f"/api/demandas/{demanda_id}/assign",
        json={"correspondent_id": correspondent_id},
        headers=headers,
    )


# ── Creación ─────────────────────────────────────────

async def test_client_creates_pending_unassigned_demanda(client, client_principal, client_headers):
    resp = await client.post("/api/demandas", json=NEW_DEMANDA, headers=client_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["status"] == "pending"
    assert data["correspondent_id"] is None
    assert data["correspondent_name"] is None
    assert data["client_id"] == client_principal.id
    assert data["client_name"] == "Maria Souza"
    assert data["deadline"] == "2026-11-30"
    assert Decimal(data["proposed_value"]) == Decimal("180.50")


async def test_client_cannot_choose_owner_or_status(client, client_principal, other_client, client_headers):
    payload = {**NEW_DEMANDA, "client_id": other_client.id, "status": "fulfilled", "correspondent_id": 1}
    resp = await client.post("/api/demandas", json=payload, headers=client_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["client_id"] == client_principal.id
    assert data["status"] == "pending"
    assert data["correspondent_id"] is None


async def test_admin_cannot_create_demanda(client, db_session, admin_headers):
    resp = await client.post("/api/demandas", json=NEW_DEMANDA, headers=admin_headers)
    assert resp.status_code == 403
    assert await _count_demandas(db_session) == 0


async def test_create_rejects_non_client_before_persisting(db_session, admin):
    principal = TokenPayload({"sub": str(admin.id), "role": "admin"})
    with pytest.raises(ForbiddenException):
        await demanda_service.create_demanda(
            db_session, principal, DemandaCreate(**NEW_DEMANDA)
        )
    assert await _count_demandas(db_session) == 0


async def test_create_requires_title(client, client_headers):
    payload = {k: v for k, v in NEW_DEMANDA.items() if k != "title"}
    resp = await client.post("/api/demandas", json=payload, headers=client_headers)
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "title"


async def test_create_rejects_negative_value(client, client_headers):
    resp = await client.post(
        "/api/demandas", json={**NEW_DEMANDA, "proposed_value": "-1"}, headers=client_headers
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "proposed_value"


# ── Asignación ───────────────────────────────────────

async def test_admin_assigns_correspondent(client, demanda, correspondent, admin_headers):
    resp = await _assign(client, demanda.id, correspondent.id, admin_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["correspondent_id"] == correspondent.id
    assert data["correspondent_name"] == "Joao Pereira"
    assert data["status"] == "in_progress"


async def test_reassign_replaces_correspondent(
    client, demanda, correspondent, other_correspondent, admin_headers
):
    await _assign(client, demanda.id, correspondent.id, admin_headers)
    resp = await _assign(client, demanda.id, other_correspondent.id, admin_headers)
    assert resp.status_code == 200
    assert resp.json()["correspondent_id"] == other_correspondent.id
    assert resp.json()["status"] == "in_progress"


async def test_only_admin_assigns(client, demanda, correspondent, client_headers, correspondent_headers):
    resp = await _assign(client, demanda.id, correspondent.id, client_headers)
    assert resp.status_code == 403
    resp = await _assign(client, demanda.id, correspondent.id, correspondent_headers)
    assert resp.status_code == 403


async def test_assign_requires_correspondent_id(client, demanda, admin_headers):
    resp = await client.patch(
        f"/api/demandas/{demanda.id}/assign", json={}, headers=admin_headers
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "El ID del corresponsal es obligatorio"


async def test_assign_unknown_demanda_is_not_found_before_field_check(client, admin, admin_headers):
    resp = await client.patch("/api/demandas/9999/assign", json={}, headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Demanda no encontrada"


async def test_assign_unknown_or_inactive_correspondent(
    client, db_session, demanda, correspondent, admin_headers
):
    resp = await _assign(client, demanda.id, 9999, admin_headers)
    assert resp.status_code == 404

    correspondent.is_active = False
    await db_session.commit()
    resp = await _assign(client, demanda.id, correspondent.id, admin_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Corresponsal no encontrado o inactivo"

    await db_session.refresh(demanda)
    assert demanda.correspondent_id is None


# ── Cambio de estado ─────────────────────────────────

async def test_full_lifecycle_scenario(
    client,
    client_principal,
    correspondent,
    client_headers,
    admin_headers,
    correspondent_headers,
    other_correspondent_headers,
):
    created = await client.post("/api/demandas", json=NEW_DEMANDA, headers=client_headers)
    demanda_id = created.json()["id"]

    resp = await _assign(client, demanda_id, correspondent.id, admin_headers)
    assert resp.json()["status"] == "in_progress"

    # Otro corresponsal no puede tocar la demanda.
    resp = await client.patch(
        f"/api/demandas/{demanda_id}/status",
        json={"status": "fulfilled"},
        headers=other_correspondent_headers,
    )
    assert resp.status_code == 403

    # El cliente tampoco cambia estados.
    resp = await client.patch(
        f"/api/demandas/{demanda_id}/status",
        json={"status": "cancelled"},
        headers=client_headers,
    )
    assert resp.status_code == 403

    resp = await client.patch(
        f"/api/demandas/{demanda_id}/status",
        json={"status": "fulfilled"},
        headers=correspondent_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "fulfilled"
    assert resp.json()["correspondent_id"] == correspondent.id

    resp = await client.get(f"/api/demandas/{demanda_id}", headers=client_headers)
    assert resp.json()["status"] == "fulfilled"


async def test_correspondent_cannot_change_unassigned_demanda(client, demanda, correspondent_headers):
    resp = await client.patch(
        f"/api/demandas/{demanda.id}/status",
        json={"status": "in_progress"},
        headers=correspondent_headers,
    )
    assert resp.status_code == 403


async def test_status_graph_is_permissive(client, demanda, correspondent, admin_headers):
    await _assign(client, demanda.id, correspondent.id, admin_headers)

    for status in ("fulfilled", "cancelled", "pending"):
        resp = await client.patch(
            f"/api/demandas/{demanda.id}/status",
            json={"status": status},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == status

    # Volver a pending no limpia la asignación.
    assert resp.json()["correspondent_id"] == correspondent.id


async def test_status_change_validation_order(client, demanda, admin_headers, correspondent_headers):
    resp = await client.patch("/api/demandas/9999/status", json={}, headers=admin_headers)
    assert resp.status_code == 404

    # Sin permiso sobre el registro se responde 403 antes de validar el body.
    resp = await client.patch(
        f"/api/demandas/{demanda.id}/status", json={}, headers=correspondent_headers
    )
    assert resp.status_code == 403

    resp = await client.patch(
        f"/api/demandas/{demanda.id}/status", json={}, headers=admin_headers
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "El campo 'status' es obligatorio"


async def test_status_outside_enum_is_rejected(client, demanda, admin_headers):
    resp = await client.patch(
        f"/api/demandas/{demanda.id}/status",
        json={"status": "archived"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "status"


async def test_last_writer_wins(client, demanda, correspondent, admin_headers, correspondent_headers):
    await _assign(client, demanda.id, correspondent.id, admin_headers)
    await client.patch(
        f"/api/demandas/{demanda.id}/status", json={"status": "fulfilled"}, headers=correspondent_headers
    )
    await client.patch(
        f"/api/demandas/{demanda.id}/status", json={"status": "cancelled"}, headers=admin_headers
    )
    resp = await client.get(f"/api/demandas/{demanda.id}", headers=admin_headers)
    assert resp.json()["status"] == "cancelled"


# ── Consulta ─────────────────────────────────────────

async def test_list_mine_is_scoped_by_role(
    client,
    db_session,
    client_principal,
    other_client,
    correspondent,
    other_correspondent,
    admin_headers,
    client_headers,
    correspondent_headers,
    other_correspondent_headers,
):
    own = await client.post("/api/demandas", json=NEW_DEMANDA, headers=client_headers)
    foreign = await client.post(
        "/api/demandas",
        json={**NEW_DEMANDA, "title": "Cópia de autos"},
        headers=auth_headers(other_client),
    )
    await _assign(client, own.json()["id"], correspondent.id, admin_headers)

    resp = await client.get("/api/demandas/mine", headers=client_headers)
    assert [d["id"] for d in resp.json()] == [own.json()["id"]]

    resp = await client.get("/api/demandas/mine", headers=correspondent_headers)
    assert [d["id"] for d in resp.json()] == [own.json()["id"]]

    resp = await client.get("/api/demandas/mine", headers=other_correspondent_headers)
    assert resp.json() == []

    resp = await client.get("/api/demandas/mine", headers=admin_headers)
    assert {d["id"] for d in resp.json()} == {own.json()["id"], foreign.json()["id"]}

    resp = await client.get(
        "/api/demandas/mine", params={"status": "pending"}, headers=admin_headers
    )
    assert [d["id"] for d in resp.json()] == [foreign.json()["id"]]


async def test_list_mine_newest_first(client, client_headers):
    first = await client.post("/api/demandas", json=NEW_DEMANDA, headers=client_headers)
    second = await client.post(
        "/api/demandas", json={**NEW_DEMANDA, "title": "Segunda"}, headers=client_headers
    )
    resp = await client.get("/api/demandas/mine", headers=client_headers)
    assert [d["id"] for d in resp.json()] == [second.json()["id"], first.json()["id"]]


async def test_get_demanda_visibility(
    client, demanda, correspondent, other_client, admin_headers,
    client_headers, correspondent_headers, other_correspondent_headers,
):
    assert (await client.get(f"/api/demandas/{demanda.id}", headers=client_headers)).status_code == 200
    assert (await client.get(f"/api/demandas/{demanda.id}", headers=admin_headers)).status_code == 200
    assert (
        await client.get(f"/api/demandas/{demanda.id}", headers=auth_headers(other_client))
    ).status_code == 403
    assert (
        await client.get(f"/api/demandas/{demanda.id}", headers=correspondent_headers)
    ).status_code == 403

    await _assign(client, demanda.id, correspondent.id, admin_headers)
    assert (
        await client.get(f"/api/demandas/{demanda.id}", headers=correspondent_headers)
    ).status_code == 200
    assert (
        await client.get(f"/api/demandas/{demanda.id}", headers=other_correspondent_headers)
    ).status_code == 403


async def test_get_unknown_demanda(client, admin_headers):
    resp = await client.get("/api/demandas/424242", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "status": 404, "message": "Demanda no encontrada"}


# ── Edición ──────────────────────────────────────────

async def test_owner_edits_pending_demanda(client, demanda, client_headers):
    resp = await client.put(
        f"/api/demandas/{demanda.id}",
        json={"title": "Audiência de instrução", "proposed_value": "400"},
        headers=client_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["title"] == "Audiência de instrução"
    assert Decimal(resp.json()["proposed_value"]) == Decimal("400")
    assert resp.json()["description"] == demanda.description


async def test_owner_cannot_edit_after_assignment(
    client, demanda, correspondent, admin_headers, client_headers
):
    await _assign(client, demanda.id, correspondent.id, admin_headers)
    resp = await client.put(
        f"/api/demandas/{demanda.id}", json={"title": "Cambio tardío"}, headers=client_headers
    )
    assert resp.status_code == 403

    resp = await client.put(
        f"/api/demandas/{demanda.id}", json={"title": "Ajuste del admin"}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "in_progress"


async def test_other_client_cannot_edit(client, demanda, other_client):
    resp = await client.put(
        f"/api/demandas/{demanda.id}", json={"title": "Ajeno"}, headers=auth_headers(other_client)
    )
    assert resp.status_code == 403


# ── Historial ────────────────────────────────────────

async def test_history_records_each_change(
    client, admin, correspondent, client_principal,
    client_headers, admin_headers, correspondent_headers,
):
    created = await client.post("/api/demandas", json=NEW_DEMANDA, headers=client_headers)
    demanda_id = created.json()["id"]
    await _assign(client, demanda_id, correspondent.id, admin_headers)
    await client.patch(
        f"/api/demandas/{demanda_id}/status", json={"status": "fulfilled"}, headers=correspondent_headers
    )

    resp = await client.get(f"/api/demandas/{demanda_id}/history", headers=client_headers)
    assert resp.status_code == 200
    entries = resp.json()
    assert [e["action"] for e in entries] == ["status_change", "assignment", "creation"]

    status_entry, assignment_entry, creation_entry = entries
    assert status_entry["actor_role"] == "correspondent"
    assert status_entry["actor_id"] == correspondent.id
    assert status_entry["details"] == {"from": "in_progress", "to": "fulfilled"}

    assert assignment_entry["actor_role"] == "admin"
    assert assignment_entry["actor_id"] == admin.id
    assert assignment_entry["details"]["to"] == {
        "correspondent_id": correspondent.id,
        "status": "in_progress",
    }

    assert creation_entry["actor_role"] == "client"
    assert creation_entry["details"] == {"title": NEW_DEMANDA["title"]}


async def test_history_hidden_from_unrelated_principals(client, demanda, other_client):
    resp = await client.get(
        f"/api/demandas/{demanda.id}/history", headers=auth_headers(other_client)
    )
    assert resp.status_code == 403


@pytest.mark.parametrize("field", ["title", "description", "proposed_value"])
async def test_edit_cannot_null_required_fields(client, demanda, client_headers, field):
    resp = await client.put(
        f"/api/demandas/{demanda.id}", json={field: None}, headers=client_headers
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == field


async def test_edit_can_clear_optional_fields(client, demanda, client_headers):
    resp = await client.put(
        f"/api/demandas/{demanda.id}", json={"process_number": None}, headers=client_headers
    )
    assert resp.status_code == 200
    assert resp.json()["process_number"] is None
