"""Contract Payments 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from crm.config import settings
from crm.database import get_db
from crm.middleware.auth_middleware import require_roles
from crm.models.contract_payment import PaymentForm, PaymentType
from crm.models.user import User
from crm.schemas.contract_payment import ContractPaymentCreate, ContractPaymentListOut, ContractPaymentRow
from crm.services import contract_payment_service
from crm.utils.permissions import CRM_ROLES, SUPER_ADMIN

router = APIRouter(prefix="/api/contract-payments", tags=["contract-payments"])


@router.post("", response_model=ContractPaymentRow)
def create_contract_payment(
    data: ContractPaymentCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    row = contract_payment_service.record_payment(db, data)
    return contract_payment_service.get_payment_response(db, row.payment_id)


@router.get("", response_model=ContractPaymentListOut)
def list_contract_payments(
    contract_id: Optional[int] = None,
    office_id: Optional[int] = None,
    manager_id: Optional[int] = None,
    payment_form: Optional[PaymentForm] = None,
    payment_type: Optional[PaymentType] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1),
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return contract_payment_service.list_payments(
        db,
        contract_id=contract_id,
        office_id=office_id,
        manager_id=manager_id,
        payment_form=payment_form,
        payment_type=payment_type,
        date_from=date_from,
        date_to=date_to,
        page=page,
        limit=limit,
    )


@router.get("/{payment_id}", response_model=ContractPaymentRow)
def get_contract_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return contract_payment_service.get_payment_response(db, payment_id)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contract_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(SUPER_ADMIN)),
):
    contract_payment_service.remove_payment(db, payment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
