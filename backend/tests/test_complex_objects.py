"""Test Complex objects 이력/롤백 API 동작과 회귀 시나리오를 검증하는 자동화 테스트입니다."""

from datetime import date
from decimal import Decimal

from crm.models.contract import Contract
from crm.models.entity_history import EntityHistory
from tests.conftest import auth_headers


def _history(client, headers, obj_id, order="asc"):
    resp = client.get(f"/api/complex-objects/{obj_id}/history", headers=headers, params={"order": order})
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_create_and_get_complex_object(client, seed_users, seed_offices):
    headers = auth_headers(client, "manager@crm.test")
    resp = client.post(
        "/api/complex-objects",
        headers=headers,
        json={
            "name": "Tower 7",
            "customer_phones": ["+7 900 1", "+7 900 2"],
            "floor": 12,
            "has_elevator": True,
            "office_id": seed_offices[0].office_id,
        },
    )
    assert resp.status_code == 200, resp.text
    obj_id = resp.json()["complex_object_id"]

    detail = client.get(f"/api/complex-objects/{obj_id}", headers=headers)
    assert detail.status_code == 200
    assert detail.json()["customer_phones"] == ["+7 900 1", "+7 900 2"]
    # 생성은 이력 대상이 아니다.
    assert _history(client, headers, obj_id) == []


def test_create_with_unknown_office_rejected(client, seed_users):
    headers = auth_headers(client, "manager@crm.test")
    resp = client.post("/api/complex-objects", headers=headers, json={"name": "X", "office_id": 999})
    assert resp.status_code == 400


def test_history_rollback_scenario(client, seed_users, seed_complex_object):
    headers = auth_headers(client, "manager@crm.test")
    obj_id = seed_complex_object.complex_object_id

    # Update 1: floor null -> 3
    resp = client.patch(f"/api/complex-objects/{obj_id}", headers=headers, json={"floor": 3})
    assert resp.status_code == 200
    history = _history(client, headers, obj_id)
    assert len(history) == 1
    first = history[0]
    assert first["action"] == "UPDATE"
    assert first["changed_fields"] == ["floor"]
    assert first["snapshot"]["name"] == "A"
    assert first["snapshot"]["floor"] == 3
    assert first["changed_by"] == seed_users["manager"].user_id
    assert first["changed_by_user"]["email"] == "manager@crm.test"

    # Update 2: 같은 값 재전송 -> 이력 없음
    resp = client.patch(f"/api/complex-objects/{obj_id}", headers=headers, json={"name": "A", "floor": 3})
    assert resp.status_code == 200
    assert len(_history(client, headers, obj_id)) == 1

    # Update 3: name -> B
    resp = client.patch(f"/api/complex-objects/{obj_id}", headers=headers, json={"name": "B"})
    assert resp.json()["name"] == "B"
    assert len(_history(client, headers, obj_id)) == 2

    resp = client.post(f"/api/complex-objects/{obj_id}/rollback/{first['history_id']}", headers=headers)
    assert resp.status_code == 200, resp.text
    restored = resp.json()
    assert restored["name"] == "A"
    assert restored["floor"] == 3

    history = _history(client, headers, obj_id)
    assert len(history) == 3
    latest = history[-1]
    assert latest["action"] == "ROLLBACK"
    assert latest["changed_fields"] == ["name"]
    assert latest["snapshot"] == first["snapshot"]


def test_history_default_order_is_newest_first(client, seed_users, seed_complex_object):
    headers = auth_headers(client, "manager@crm.test")
    obj_id = seed_complex_object.complex_object_id
    client.patch(f"/api/complex-objects/{obj_id}", headers=headers, json={"floor": 1})
    client.patch(f"/api/complex-objects/{obj_id}", headers=headers, json={"floor": 2})

    resp = client.get(f"/api/complex-objects/{obj_id}/history", headers=headers)
    assert [row["snapshot"]["floor"] for row in resp.json()] == [2, 1]
    assert [row["snapshot"]["floor"] for row in _history(client, headers, obj_id, "asc")] == [1, 2]


def test_rollback_restores_every_field_after_many_changes(client, seed_users, seed_complex_object):
    headers = auth_headers(client, "manager@crm.test")
    obj_id = seed_complex_object.complex_object_id
    client.patch(
        f"/api/complex-objects/{obj_id}",
        headers=headers,
        json={"customer_phones": ["1", "2"], "address": "Main st. 1"},
    )
    target = _history(client, headers, obj_id)[-1]

    client.patch(f"/api/complex-objects/{obj_id}", headers=headers, json={"customer_phones": ["2", "1"]})
    client.patch(f"/api/complex-objects/{obj_id}", headers=headers, json={"notes": "late notes", "floor": 5})
    client.patch(f"/api/complex-objects/{obj_id}", headers=headers, json={"address": None, "has_elevator": False})

    resp = client.post(f"/api/complex-objects/{obj_id}/rollback/{target['history_id']}", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    for name, value in target["snapshot"].items():
        assert body[name] == value
    assert body["notes"] is None

    latest = _history(client, headers, obj_id)[-1]
    assert latest["action"] == "ROLLBACK"
    assert latest["changed_fields"] == ["customer_phones", "address", "notes", "has_elevator", "floor"]


def test_rollback_to_rollback_entry_rejected(client, seed_users, seed_complex_object):
    headers = auth_headers(client, "manager@crm.test")
    obj_id = seed_complex_object.complex_object_id
    client.patch(f"/api/complex-objects/{obj_id}", headers=headers, json={"floor": 1})
    client.patch(f"/api/complex-objects/{obj_id}", headers=headers, json={"floor": 2})
    first = _history(client, headers, obj_id)[0]
    client.post(f"/api/complex-objects/{obj_id}/rollback/{first['history_id']}", headers=headers)
    rollback_entry = _history(client, headers, obj_id)[-1]
    assert rollback_entry["action"] == "ROLLBACK"

    resp = client.post(f"/api/complex-objects/{obj_id}/rollback/{rollback_entry['history_id']}", headers=headers)
    assert resp.status_code == 409
    assert len(_history(client, headers, obj_id)) == 3


def test_rollback_to_current_state_writes_nothing(client, seed_users, seed_complex_object):
    headers = auth_headers(client, "manager@crm.test")
    obj_id = seed_complex_object.complex_object_id
    client.patch(f"/api/complex-objects/{obj_id}", headers=headers, json={"floor": 4})
    entry = _history(client, headers, obj_id)[-1]

    resp = client.post(f"/api/complex-objects/{obj_id}/rollback/{entry['history_id']}", headers=headers)
    assert resp.status_code == 200
    assert len(_history(client, headers, obj_id)) == 1


def test_rollback_with_other_entity_history_not_found(client, db, seed_users, seed_complex_object):
    headers = auth_headers(client, "manager@crm.test")
    other = client.post("/api/complex-objects", headers=headers, json={"name": "Other"}).json()
    client.patch(f"/api/complex-objects/{other['complex_object_id']}", headers=headers, json={"floor": 9})
    foreign = _history(client, headers, other["complex_object_id"])[0]

    obj_id = seed_complex_object.complex_object_id
    resp = client.post(f"/api/complex-objects/{obj_id}/rollback/{foreign['history_id']}", headers=headers)
    assert resp.status_code == 404

    resp = client.post(f"/api/complex-objects/{obj_id}/rollback/99999", headers=headers)
    assert resp.status_code == 404


def test_history_of_missing_object_not_found(client, seed_users):
    headers = auth_headers(client, "manager@crm.test")
    assert client.get("/api/complex-objects/999/history", headers=headers).status_code == 404
    assert client.patch("/api/complex-objects/999", headers=headers, json={"floor": 1}).status_code == 404


def test_update_clearing_required_name_rejected(client, seed_users, seed_complex_object):
    headers = auth_headers(client, "manager@crm.test")
    obj_id = seed_complex_object.complex_object_id
    resp = client.patch(f"/api/complex-objects/{obj_id}", headers=headers, json={"name": None})
    assert resp.status_code == 400
    assert _history(client, headers, obj_id) == []


def test_non_crm_role_forbidden(client, seed_users, seed_complex_object):
    headers = auth_headers(client, "customer@crm.test")
    obj_id = seed_complex_object.complex_object_id
    assert client.get(f"/api/complex-objects/{obj_id}/history", headers=headers).status_code == 403
    assert client.patch(f"/api/complex-objects/{obj_id}", headers=headers, json={"floor": 1}).status_code == 403


def test_delete_unlinks_contracts_and_purges_history(client, db, seed_users, seed_complex_object):
    obj_id = seed_complex_object.complex_object_id
    contract = Contract(
        contract_number="C-77",
        contract_date=date(2026, 3, 3),
        status="ACTIVE",
        customer_name="Linked",
        total_amount=Decimal("100"),
        complex_object_id=obj_id,
    )
    db.add(contract)
    db.commit()
    contract_id = contract.contract_id

    manager = auth_headers(client, "manager@crm.test")
    client.patch(f"/api/complex-objects/{obj_id}", headers=manager, json={"floor": 2})
    contracts = client.get(f"/api/complex-objects/{obj_id}/contracts", headers=manager).json()
    assert [c["contract_id"] for c in contracts] == [contract_id]

    assert client.delete(f"/api/complex-objects/{obj_id}", headers=manager).status_code == 403

    admin = auth_headers(client, "admin@crm.test")
    assert client.delete(f"/api/complex-objects/{obj_id}", headers=admin).status_code == 204
    assert client.get(f"/api/complex-objects/{obj_id}", headers=admin).status_code == 404

    db.expire_all()
    assert db.get(Contract, contract_id).complex_object_id is None
    assert db.query(EntityHistory).filter(
        EntityHistory.entity_type == "complex_object",
        EntityHistory.entity_id == obj_id,
    ).count() == 0
    unlink = client.get(f"/api/contracts/{contract_id}/history", headers=admin).json()
    assert len(unlink) == 1
    assert unlink[0]["changed_fields"] == ["complex_object_id"]
