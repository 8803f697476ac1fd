"""ComplexObject 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal


class ComplexObjectBase(BaseModel):
    name: str
    customer_name: Optional[str] = None
    customer_phones: List[str] = []
    address: Optional[str] = None
    notes: Optional[str] = None
    has_elevator: Optional[bool] = None
    floor: Optional[int] = None
    office_id: Optional[int] = None
    manager_id: Optional[int] = None


class ComplexObjectCreate(ComplexObjectBase):
    pass


class ComplexObjectUpdate(BaseModel):
    # 전달된 필드만 변경한다. null을 명시하면 값을 비운다.
    name: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phones: Optional[List[str]] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    has_elevator: Optional[bool] = None
    floor: Optional[int] = None
    office_id: Optional[int] = None
    manager_id: Optional[int] = None


class ComplexObjectContractBrief(BaseModel):
    contract_id: int
    contract_number: str
    contract_date: date
    status: str
    total_amount: Decimal

    model_config = {"from_attributes": True}


class ComplexObjectOut(ComplexObjectBase):
    complex_object_id: int
    contracts: List[ComplexObjectContractBrief] = []
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}
