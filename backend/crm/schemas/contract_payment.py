"""ContractPayment 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

from crm.models.contract_payment import PaymentForm, PaymentType


class ContractPaymentCreate(BaseModel):
    contract_id: int
    payment_date: date
    amount: Decimal
    payment_form: PaymentForm
    payment_type: PaymentType
    manager_id: Optional[int] = None
    notes: Optional[str] = None


class ContractPaymentOut(BaseModel):
    payment_id: int
    contract_id: int
    payment_date: date
    amount: Decimal
    payment_form: str
    payment_type: str
    manager_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ContractPaymentRow(ContractPaymentOut):
    contract_number: Optional[str] = None
    customer_name: Optional[str] = None
    contract_total_amount: Optional[Decimal] = None
    office_id: Optional[int] = None
    # 계약의 전체 결제 합계 (필터/페이지와 무관)
    contract_total_paid: Decimal
    percent_paid: Decimal


class ContractPaymentListOut(BaseModel):
    data: List[ContractPaymentRow]
    total: int
    page: int
    limit: int
    total_pages: int
