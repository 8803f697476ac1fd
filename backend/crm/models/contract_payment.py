"""계약별 결제(ContractPayment)의 SQLAlchemy 모델 정의입니다."""

import enum

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Numeric, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from crm.database import Base


class PaymentForm(str, enum.Enum):
    CASH = "CASH"
    TERMINAL = "TERMINAL"
    QR = "QR"
    INVOICE = "INVOICE"
    LC_TRANSFER = "LC_TRANSFER"


class PaymentType(str, enum.Enum):
    PREPAYMENT = "PREPAYMENT"
    ADVANCE = "ADVANCE"
    FINAL = "FINAL"
    AMENDMENT = "AMENDMENT"


class ContractPayment(Base):
    __tablename__ = "contract_payments"

    payment_id = Column(Integer, primary_key=True, autoincrement=True)
    contract_id = Column(Integer, ForeignKey("contracts.contract_id", ondelete="CASCADE"), nullable=False)
    payment_date = Column(Date, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    payment_form = Column(String(20), nullable=False)
    payment_type = Column(String(20), nullable=False)
    manager_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())

    contract = relationship("Contract", back_populates="payments")
    manager = relationship("User")

    __table_args__ = (
        Index("idx_contract_payments_contract", "contract_id", "payment_date"),
    )
