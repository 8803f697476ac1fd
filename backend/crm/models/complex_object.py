"""ComplexObject(복수 계약을 묶는 시공 대상 객체)의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from crm.database import Base


class ComplexObject(Base):
    __tablename__ = "complex_objects"

    complex_object_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    customer_name = Column(String(200))
    customer_phones = Column(JSON, nullable=False, default=list)  # 순서가 있는 전화번호 목록
    address = Column(String(300))
    notes = Column(Text)
    has_elevator = Column(Boolean)
    floor = Column(Integer)
    office_id = Column(Integer, ForeignKey("offices.office_id"), nullable=True)
    manager_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    office = relationship("Office")
    manager = relationship("User")
    contracts = relationship("Contract", back_populates="complex_object", order_by="Contract.contract_date")
