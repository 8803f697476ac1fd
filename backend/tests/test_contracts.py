"""Test Contracts 이력 추적(금액/날짜 필드)과 롤백 동작을 검증하는 자동화 테스트입니다."""

from decimal import Decimal

from crm.models.contract_payment import ContractPayment
from tests.conftest import auth_headers


def test_create_and_list_contracts(client, seed_users, seed_offices):
    headers = auth_headers(client, "manager@crm.test")
    for number, name in (("C-1", "Ivanov"), ("C-2", "Petrova")):
        resp = client.post(
            "/api/contracts",
            headers=headers,
            json={
                "contract_number": number,
                "contract_date": "2026-03-01",
                "customer_name": name,
                "total_amount": "10000",
                "office_id": seed_offices[0].office_id,
            },
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["status"] == "DRAFT"

    resp = client.get("/api/contracts", headers=headers, params={"search": "petr"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    assert body["data"][0]["contract_number"] == "C-2"


def test_amount_representation_change_is_not_a_change(client, seed_users, seed_contract):
    headers = auth_headers(client, "manager@crm.test")
    contract_id = seed_contract.contract_id
    resp = client.patch(f"/api/contracts/{contract_id}", headers=headers, json={"total_amount": "5000"})
    assert resp.status_code == 200
    assert client.get(f"/api/contracts/{contract_id}/history", headers=headers).json() == []


def test_contract_rollback_restores_dates_and_amounts(client, seed_users, seed_contract):
    headers = auth_headers(client, "manager@crm.test")
    contract_id = seed_contract.contract_id
    client.patch(
        f"/api/contracts/{contract_id}",
        headers=headers,
        json={"total_amount": "7500.50", "installation_date": "2026-04-10", "status": "ACTIVE"},
    )
    history = client.get(f"/api/contracts/{contract_id}/history", headers=headers, params={"order": "asc"}).json()
    assert len(history) == 1
    target = history[0]
    assert target["changed_fields"] == ["status", "total_amount", "installation_date"]
    assert target["snapshot"]["total_amount"] == "7500.5"
    assert target["snapshot"]["installation_date"] == "2026-04-10"

    client.patch(
        f"/api/contracts/{contract_id}",
        headers=headers,
        json={"total_amount": "9000", "installation_date": None, "status": "COMPLETED"},
    )
    resp = client.post(f"/api/contracts/{contract_id}/rollback/{target['history_id']}", headers=headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert Decimal(body["total_amount"]) == Decimal("7500.50")
    assert body["installation_date"] == "2026-04-10"
    assert body["status"] == "ACTIVE"


def test_negative_amount_rejected(client, seed_users, seed_contract):
    headers = auth_headers(client, "manager@crm.test")
    resp = client.patch(f"/api/contracts/{seed_contract.contract_id}", headers=headers, json={"discount": "-1"})
    assert resp.status_code == 400


def test_contract_detail_includes_total_paid(client, db, seed_users, seed_contract):
    db.add_all([
        ContractPayment(contract_id=seed_contract.contract_id, payment_date=seed_contract.contract_date,
                        amount=Decimal("1200"), payment_form="CASH", payment_type="PREPAYMENT"),
        ContractPayment(contract_id=seed_contract.contract_id, payment_date=seed_contract.contract_date,
                        amount=Decimal("300.50"), payment_form="QR", payment_type="ADVANCE"),
    ])
    db.commit()
    headers = auth_headers(client, "manager@crm.test")
    resp = client.get(f"/api/contracts/{seed_contract.contract_id}", headers=headers)
    assert resp.status_code == 200
    assert Decimal(resp.json()["contract_total_paid"]) == Decimal("1500.50")


def test_delete_contract_removes_payments(client, db, seed_users, seed_contract):
    contract_id = seed_contract.contract_id
    db.add(ContractPayment(contract_id=contract_id, payment_date=seed_contract.contract_date,
                           amount=Decimal("10"), payment_form="CASH", payment_type="FINAL"))
    db.commit()
    headers = auth_headers(client, "admin@crm.test")
    client.patch(f"/api/contracts/{contract_id}", headers=headers, json={"notes": "to be removed"})

    assert client.delete(f"/api/contracts/{contract_id}", headers=headers).status_code == 204
    db.expire_all()
    assert db.query(ContractPayment).filter(ContractPayment.contract_id == contract_id).count() == 0
    assert client.get(f"/api/contracts/{contract_id}/history", headers=headers).status_code == 404


def test_amount_with_extra_decimal_places_rejected(client, seed_users, seed_contract):
    headers = auth_headers(client, "manager@crm.test")
    contract_id = seed_contract.contract_id
    resp = client.patch(f"/api/contracts/{contract_id}", headers=headers, json={"total_amount": "100.555"})
    assert resp.status_code == 422
    assert client.get(f"/api/contracts/{contract_id}/history", headers=headers).json() == []


def test_repeated_amount_update_writes_one_entry_matching_stored_value(client, seed_users, seed_contract):
    headers = auth_headers(client, "manager@crm.test")
    contract_id = seed_contract.contract_id
    for _ in range(2):
        resp = client.patch(f"/api/contracts/{contract_id}", headers=headers, json={"total_amount": "100.50"})
        assert resp.status_code == 200

    history = client.get(f"/api/contracts/{contract_id}/history", headers=headers).json()
    assert len(history) == 1
    stored = client.get(f"/api/contracts/{contract_id}", headers=headers).json()["total_amount"]
    assert Decimal(history[0]["snapshot"]["total_amount"]) == Decimal(stored) == Decimal("100.50")


def test_rollback_to_link_with_deleted_complex_object_rejected(client, db, seed_users, seed_contract, seed_complex_object):
    manager = auth_headers(client, "manager@crm.test")
    admin = auth_headers(client, "admin@crm.test")
    contract_id = seed_contract.contract_id
    obj_id = seed_complex_object.complex_object_id

    resp = client.patch(f"/api/contracts/{contract_id}", headers=manager, json={"complex_object_id": obj_id})
    assert resp.status_code == 200
    link_entry = client.get(f"/api/contracts/{contract_id}/history", headers=manager).json()[0]
    assert client.delete(f"/api/complex-objects/{obj_id}", headers=admin).status_code == 204

    resp = client.post(f"/api/contracts/{contract_id}/rollback/{link_entry['history_id']}", headers=manager)
    assert resp.status_code == 400
    assert client.get(f"/api/contracts/{contract_id}", headers=manager).json()["complex_object_id"] is None
    history = client.get(f"/api/contracts/{contract_id}/history", headers=manager).json()
    assert [row["action"] for row in history] == ["UPDATE", "UPDATE"]


def test_update_to_unknown_complex_object_rejected(client, seed_users, seed_contract):
    headers = auth_headers(client, "manager@crm.test")
    resp = client.patch(f"/api/contracts/{seed_contract.contract_id}", headers=headers, json={"complex_object_id": 999})
    assert resp.status_code == 400
