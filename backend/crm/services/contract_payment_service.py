"""Contract Payment Service 도메인 서비스 레이어입니다. 결제 기록과 계약별 누적 결제액 집계를 담당합니다."""

import logging
import math
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from crm.config import settings
from crm.exceptions import NotFoundError, PersistenceError, ValidationError
from crm.models.complex_object import ComplexObject
from crm.models.contract import Contract
from crm.models.contract_payment import ContractPayment, PaymentForm, PaymentType
from crm.models.user import User
from crm.schemas.contract_payment import ContractPaymentCreate
from crm.services import snapshot_codec

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def record_payment(db: Session, data: ContractPaymentCreate) -> ContractPayment:
    try:
        amount = snapshot_codec.money_value(data.amount)
    except (TypeError, ValueError, InvalidOperation):
        raise ValidationError("결제 금액은 소수점 둘째 자리까지 입력할 수 있습니다.", context={"amount": data.amount})
    if amount <= ZERO:
        raise ValidationError("결제 금액은 0보다 커야 합니다.", context={"amount": amount})
    contract = db.query(Contract).filter(Contract.contract_id == data.contract_id).first()
    if not contract:
        raise NotFoundError("계약을 찾을 수 없습니다.", context={"contract_id": data.contract_id})
    if data.manager_id is not None:
        if not db.query(User).filter(User.user_id == data.manager_id).first():
            raise ValidationError("존재하지 않는 담당자입니다.", context={"manager_id": data.manager_id})

    row = ContractPayment(
        contract_id=data.contract_id,
        payment_date=data.payment_date,
        amount=amount,
        payment_form=PaymentForm(data.payment_form).value,
        payment_type=PaymentType(data.payment_type).value,
        manager_id=data.manager_id,
        notes=data.notes,
    )
    try:
        db.add(row)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("[payments] create rejected for contract #%s: %s", data.contract_id, exc)
        raise PersistenceError("결제를 저장하지 못했습니다.", context={"contract_id": data.contract_id}) from exc
    db.refresh(row)
    logger.info(
        "[payments] contract #%s payment #%s amount=%s form=%s type=%s",
        row.contract_id,
        row.payment_id,
        row.amount,
        row.payment_form,
        row.payment_type,
    )
    return row


def totals_by_contract(db: Session, contract_ids: List[int]) -> Dict[int, Decimal]:
    """Sum every payment of each contract, regardless of listing filters."""
    if not contract_ids:
        return {}
    rows = (
        db.query(ContractPayment.contract_id, func.sum(ContractPayment.amount))
        .filter(ContractPayment.contract_id.in_(contract_ids))
        .group_by(ContractPayment.contract_id)
        .all()
    )
    return {int(contract_id): Decimal(str(total or 0)) for contract_id, total in rows}


def contract_total_paid(db: Session, contract_id: int) -> Decimal:
    return totals_by_contract(db, [contract_id]).get(contract_id, ZERO)


def percent_of_total(amount: Decimal, total_paid: Decimal) -> Decimal:
    # 계약 총액이 아니라 지금까지의 누적 결제액 대비 비율이다.
    if not total_paid:
        return ZERO
    return Decimal(amount) / total_paid


def _row_response(row: ContractPayment, total_paid: Decimal) -> Dict[str, Any]:
    contract = row.contract
    complex_object = contract.complex_object if contract else None
    office_id = None
    if contract is not None:
        office_id = contract.office_id
        if office_id is None and complex_object is not None:
            office_id = complex_object.office_id
    return {
        "payment_id": row.payment_id,
        "contract_id": row.contract_id,
        "payment_date": row.payment_date,
        "amount": Decimal(str(row.amount)),
        "payment_form": row.payment_form,
        "payment_type": row.payment_type,
        "manager_id": row.manager_id,
        "notes": row.notes,
        "created_at": row.created_at,
        "contract_number": contract.contract_number if contract else None,
        "customer_name": contract.customer_name if contract else None,
        "contract_total_amount": Decimal(str(contract.total_amount)) if contract and contract.total_amount is not None else None,
        "office_id": office_id,
        "contract_total_paid": total_paid,
        "percent_paid": percent_of_total(Decimal(str(row.amount)), total_paid),
    }


def list_payments(
    db: Session,
    *,
    contract_id: Optional[int] = None,
    office_id: Optional[int] = None,
    manager_id: Optional[int] = None,
    payment_form: Optional[str] = None,
    payment_type: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: int = 1,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    page = max(int(page or 1), 1)
    limit = int(limit or settings.DEFAULT_PAGE_LIMIT)
    if limit < 1 or limit > settings.MAX_PAGE_LIMIT:
        raise ValidationError(
            f"limit은 1 이상 {settings.MAX_PAGE_LIMIT} 이하여야 합니다.",
            context={"limit": limit},
        )
    if date_from and date_to and date_from > date_to:
        raise ValidationError("시작일이 종료일보다 늦을 수 없습니다.")

    q = db.query(ContractPayment)
    if contract_id is not None:
        q = q.filter(ContractPayment.contract_id == contract_id)
    if office_id is not None:
        # 사무소는 계약에 직접 지정되거나, 계약이 속한 ComplexObject를 통해 지정된다.
        q = (
            q.join(Contract, ContractPayment.contract_id == Contract.contract_id)
            .outerjoin(ComplexObject, Contract.complex_object_id == ComplexObject.complex_object_id)
            .filter(or_(Contract.office_id == office_id, ComplexObject.office_id == office_id))
        )
    if manager_id is not None:
        q = q.filter(ContractPayment.manager_id == manager_id)
    if payment_form:
        q = q.filter(ContractPayment.payment_form == PaymentForm(payment_form).value)
    if payment_type:
        q = q.filter(ContractPayment.payment_type == PaymentType(payment_type).value)
    if date_from:
        q = q.filter(ContractPayment.payment_date >= date_from)
    if date_to:
        q = q.filter(ContractPayment.payment_date <= date_to)

    total = q.count()
    rows = (
        q.options(joinedload(ContractPayment.contract).joinedload(Contract.complex_object))
        .order_by(ContractPayment.payment_date.desc(), ContractPayment.payment_id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    totals = totals_by_contract(db, sorted({row.contract_id for row in rows}))

    return {
        "data": [_row_response(row, totals.get(row.contract_id, ZERO)) for row in rows],
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(total / limit),
    }


def get_payment(db: Session, payment_id: int) -> ContractPayment:
    row = db.query(ContractPayment).filter(ContractPayment.payment_id == payment_id).first()
    if not row:
        raise NotFoundError("결제 내역을 찾을 수 없습니다.", context={"payment_id": payment_id})
    return row


def get_payment_response(db: Session, payment_id: int) -> Dict[str, Any]:
    row = get_payment(db, payment_id)
    return _row_response(row, contract_total_paid(db, row.contract_id))


def remove_payment(db: Session, payment_id: int) -> None:
    row = get_payment(db, payment_id)
    contract_id = row.contract_id
    try:
        db.delete(row)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("[payments] delete rejected for payment #%s: %s", payment_id, exc)
        raise PersistenceError("결제를 삭제하지 못했습니다.", context={"payment_id": payment_id}) from exc
    logger.info("[payments] contract #%s payment #%s deleted", contract_id, payment_id)
