"""Contract 도메인의 SQLAlchemy 모델 정의입니다."""

import enum

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from crm.database import Base


class ContractStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class Contract(Base):
    __tablename__ = "contracts"

    contract_id = Column(Integer, primary_key=True, autoincrement=True)
    contract_number = Column(String(50), nullable=False)
    contract_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default=ContractStatus.DRAFT.value)
    office_id = Column(Integer, ForeignKey("offices.office_id"), nullable=True)
    complex_object_id = Column(Integer, ForeignKey("complex_objects.complex_object_id"), nullable=True)
    manager_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(30))
    customer_address = Column(String(300))
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)  # 계약 총액
    advance_amount = Column(Numeric(14, 2))
    discount = Column(Numeric(14, 2))
    installation_date = Column(Date)
    delivery_date = Column(Date)
    notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    office = relationship("Office")
    manager = relationship("User")
    complex_object = relationship("ComplexObject", back_populates="contracts")
    payments = relationship(
        "ContractPayment",
        back_populates="contract",
        cascade="all, delete-orphan",
        order_by="ContractPayment.payment_date",
    )
