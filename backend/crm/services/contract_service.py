"""Contract Service 도메인 서비스 레이어입니다. 계약 CRUD와 이력 추적 변경을 담당합니다."""

import logging
import math
from datetime import date
from decimal import InvalidOperation
from typing import Any, Dict, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from crm.config import settings
from crm.exceptions import NotFoundError, ValidationError
from crm.models.contract import Contract
from crm.models.user import User
from crm.schemas.contract import ContractCreate, ContractUpdate
from crm.services import change_tracker, contract_payment_service, history_service, snapshot_codec
from crm.services.tracked_entities import CONTRACT

logger = logging.getLogger(__name__)

AMOUNT_FIELDS = ("total_amount", "advance_amount", "discount")


def _check_amounts(values: Dict[str, Any]) -> None:
    for name in AMOUNT_FIELDS:
        value = values.get(name)
        if value is None:
            continue
        try:
            amount = snapshot_codec.money_value(value)
        except (TypeError, ValueError, InvalidOperation):
            raise ValidationError(f"'{name}' 금액 형식이 올바르지 않습니다.", context={"field": name})
        if amount < 0:
            raise ValidationError(f"'{name}' 금액은 음수일 수 없습니다.", context={"field": name})


def create_contract(db: Session, data: ContractCreate) -> Contract:
    values = data.model_dump()
    values["status"] = data.status.value
    if not data.contract_number.strip() or not data.customer_name.strip():
        raise ValidationError("계약 번호와 고객명은 비워둘 수 없습니다.")
    _check_amounts(values)
    CONTRACT.check_references(db, values)
    contract = Contract(**values)
    db.add(contract)
    db.commit()
    db.refresh(contract)
    logger.info("[contracts] contract #%s (%s) created", contract.contract_id, contract.contract_number)
    return contract


def list_contracts(
    db: Session,
    *,
    status: Optional[str] = None,
    office_id: Optional[int] = None,
    manager_id: Optional[int] = None,
    complex_object_id: Optional[int] = None,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: int = 1,
    limit: int = 20,
) -> Dict[str, Any]:
    page = max(int(page or 1), 1)
    if limit < 1 or limit > settings.MAX_PAGE_LIMIT:
        raise ValidationError(
            f"limit은 1 이상 {settings.MAX_PAGE_LIMIT} 이하여야 합니다.",
            context={"limit": limit},
        )
    q = db.query(Contract)
    if status:
        q = q.filter(Contract.status == status)
    if office_id is not None:
        q = q.filter(Contract.office_id == office_id)
    if manager_id is not None:
        q = q.filter(Contract.manager_id == manager_id)
    if complex_object_id is not None:
        q = q.filter(Contract.complex_object_id == complex_object_id)
    if search:
        pattern = f"%{search.strip()}%"
        q = q.filter(
            or_(
                Contract.contract_number.ilike(pattern),
                Contract.customer_name.ilike(pattern),
                Contract.customer_phone.ilike(pattern),
                Contract.customer_address.ilike(pattern),
            )
        )
    if date_from:
        q = q.filter(Contract.contract_date >= date_from)
    if date_to:
        q = q.filter(Contract.contract_date <= date_to)

    total = q.count()
    rows = (
        q.order_by(Contract.contract_date.desc(), Contract.contract_id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "data": rows,
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(total / limit),
    }


def get_contract(db: Session, contract_id: int) -> Contract:
    contract = db.query(Contract).filter(Contract.contract_id == contract_id).first()
    if not contract:
        raise NotFoundError("계약을 찾을 수 없습니다.", context={"contract_id": contract_id})
    return contract


def get_contract_detail(db: Session, contract_id: int) -> Dict[str, Any]:
    contract = get_contract(db, contract_id)
    detail = {column.name: getattr(contract, column.name) for column in Contract.__table__.columns}
    detail["contract_total_paid"] = contract_payment_service.contract_total_paid(db, contract_id)
    return detail


def update_contract(db: Session, contract_id: int, data: ContractUpdate, actor: User) -> Contract:
    mutation = data.model_dump(exclude_unset=True, mode="json")
    get_contract(db, contract_id)
    _check_amounts(mutation)
    return change_tracker.tracked_update(db, CONTRACT, contract_id, mutation, actor)


def delete_contract(db: Session, contract_id: int, actor: User) -> None:
    contract = get_contract(db, contract_id)
    history_service.purge_entity(db, entity_type=CONTRACT.entity_type, entity_id=contract_id)
    db.delete(contract)
    db.commit()
    logger.info("[contracts] contract #%s deleted by=%s", contract_id, actor.user_id)
