"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from crm.models.user import User
from crm.models.office import Office
from crm.models.complex_object import ComplexObject
from crm.models.contract import Contract, ContractStatus
from crm.models.contract_payment import ContractPayment, PaymentForm, PaymentType
from crm.models.entity_history import EntityHistory, HistoryAction

__all__ = [
    "User",
    "Office",
    "ComplexObject",
    "Contract", "ContractStatus",
    "ContractPayment", "PaymentForm", "PaymentType",
    "EntityHistory", "HistoryAction",
]
