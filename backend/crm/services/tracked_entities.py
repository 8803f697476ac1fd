"""변경 이력 추적 대상 엔티티와 추적 필드 목록(allowlist)을 정의합니다."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from crm.models.complex_object import ComplexObject
from crm.models.contract import Contract
from crm.models.office import Office
from crm.models.user import User
from crm.utils.helpers import ensure_reference

STRING = "string"
INT = "int"
BOOL = "bool"
DECIMAL = "decimal"
DATE = "date"
LIST = "list"


@dataclass(frozen=True)
class TrackedSchema:
    entity_type: str
    model: Any
    pk: str
    label: str
    # 필드명 -> 값 종류. 순서가 snapshot/changed_fields 순서가 된다.
    fields: Dict[str, str] = field(default_factory=dict)
    required: Tuple[str, ...] = ()
    # 참조 필드명 -> (대상 모델, 대상 pk, 표시 이름)
    references: Dict[str, Tuple[Any, str, str]] = field(default_factory=dict)

    def load(self, db: Session, entity_id: int, *, for_update: bool = False) -> Optional[Any]:
        q = db.query(self.model).filter(getattr(self.model, self.pk) == entity_id)
        if for_update:
            q = q.with_for_update()
        return q.first()

    def check_references(self, db: Session, values: Dict[str, Any]) -> None:
        for name, (model, pk, label) in self.references.items():
            ensure_reference(db, model, pk, values.get(name), label)


COMPLEX_OBJECT = TrackedSchema(
    entity_type="complex_object",
    model=ComplexObject,
    pk="complex_object_id",
    label="ComplexObject",
    fields={
        "name": STRING,
        "customer_name": STRING,
        "customer_phones": LIST,
        "address": STRING,
        "notes": STRING,
        "has_elevator": BOOL,
        "floor": INT,
        "office_id": INT,
        "manager_id": INT,
    },
    required=("name",),
    references={
        "office_id": (Office, "office_id", "사무소"),
        "manager_id": (User, "user_id", "담당자"),
    },
)

CONTRACT = TrackedSchema(
    entity_type="contract",
    model=Contract,
    pk="contract_id",
    label="Contract",
    fields={
        "contract_number": STRING,
        "contract_date": DATE,
        "status": STRING,
        "office_id": INT,
        "complex_object_id": INT,
        "manager_id": INT,
        "customer_name": STRING,
        "customer_phone": STRING,
        "customer_address": STRING,
        "total_amount": DECIMAL,
        "advance_amount": DECIMAL,
        "discount": DECIMAL,
        "installation_date": DATE,
        "delivery_date": DATE,
        "notes": STRING,
    },
    required=("contract_number", "contract_date", "status", "customer_name", "total_amount"),
    references={
        "office_id": (Office, "office_id", "사무소"),
        "complex_object_id": (ComplexObject, "complex_object_id", "객체"),
        "manager_id": (User, "user_id", "담당자"),
    },
)

OFFICE = TrackedSchema(
    entity_type="office",
    model=Office,
    pk="office_id",
    label="Office",
    fields={
        "name": STRING,
        "prefix": STRING,
        "address": STRING,
        "phone": STRING,
        "is_active": BOOL,
        "sort_order": INT,
    },
    required=("name", "is_active", "sort_order"),
)
