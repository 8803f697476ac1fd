"""Contract 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

from crm.models.contract import ContractStatus


class ContractBase(BaseModel):
    contract_number: str
    contract_date: date
    status: ContractStatus = ContractStatus.DRAFT
    office_id: Optional[int] = None
    complex_object_id: Optional[int] = None
    manager_id: Optional[int] = None
    customer_name: str
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    total_amount: Decimal = Field(default=Decimal("0"), decimal_places=2)
    advance_amount: Optional[Decimal] = Field(default=None, decimal_places=2)
    discount: Optional[Decimal] = Field(default=None, decimal_places=2)
    installation_date: Optional[date] = None
    delivery_date: Optional[date] = None
    notes: Optional[str] = None


class ContractCreate(ContractBase):
    pass


class ContractUpdate(BaseModel):
    contract_number: Optional[str] = None
    contract_date: Optional[date] = None
    status: Optional[ContractStatus] = None
    office_id: Optional[int] = None
    complex_object_id: Optional[int] = None
    manager_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    total_amount: Optional[Decimal] = Field(default=None, decimal_places=2)
    advance_amount: Optional[Decimal] = Field(default=None, decimal_places=2)
    discount: Optional[Decimal] = Field(default=None, decimal_places=2)
    installation_date: Optional[date] = None
    delivery_date: Optional[date] = None
    notes: Optional[str] = None


class ContractOut(ContractBase):
    contract_id: int
    status: str
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class ContractDetailOut(ContractOut):
    contract_total_paid: Decimal


class ContractListOut(BaseModel):
    data: List[ContractOut]
    total: int
    page: int
    limit: int
    total_pages: int
