"""추적 필드 스냅샷을 캡처/비교/복원하는 코덱입니다.

스냅샷은 JSON 컬럼에 그대로 저장할 수 있는 값만 담는다. Decimal은 값 기준의
정규 문자열, 날짜는 ISO 문자열, 목록은 순서를 유지한 list로 캡처하므로
저장된 스냅샷과 새로 캡처한 스냅샷을 ``==``로 비교할 수 있다.
"""

import enum
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from crm.exceptions import ValidationError
from crm.services.tracked_entities import BOOL, DATE, DECIMAL, INT, LIST, STRING, TrackedSchema

Snapshot = Dict[str, Any]

_MISSING = object()

# Numeric(14, 2) 컬럼 스케일
MONEY_QUANT = Decimal("0.01")


def _canonical_decimal(value: Any) -> str:
    number = value if isinstance(value, Decimal) else Decimal(str(value))
    if number == 0:
        return "0"
    if number == number.to_integral_value():
        return str(number.quantize(Decimal(1)))
    return str(number.normalize())


def money_value(value: Any) -> Decimal:
    """Parse a money amount, refusing more places than the column keeps."""
    number = value if isinstance(value, Decimal) else Decimal(str(value))
    if not number.is_finite():
        raise ValueError("amount must be finite")
    if number != number.quantize(MONEY_QUANT):
        raise ValueError("amount has more than 2 decimal places")
    return number


def encode_value(kind: str, value: Any) -> Any:
    if value is None:
        return [] if kind == LIST else None
    if kind == DECIMAL:
        return _canonical_decimal(value)
    if kind == DATE:
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        return str(value)
    if kind == LIST:
        return list(value)
    return value


def decode_value(kind: str, value: Any) -> Any:
    if value is None:
        return [] if kind == LIST else None
    if kind == DECIMAL:
        return money_value(value)
    if kind == DATE:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        return date.fromisoformat(str(value)[:10])
    if kind == INT:
        if isinstance(value, bool):
            raise TypeError("boolean is not an integer")
        return int(value)
    if kind == BOOL:
        if not isinstance(value, bool):
            raise TypeError("expected boolean")
        return value
    if kind == LIST:
        if isinstance(value, (str, bytes, dict)):
            raise TypeError("expected list")
        return [str(item) for item in value]
    if kind == STRING:
        if isinstance(value, enum.Enum):
            return value.value
        return str(value)
    return value


def capture(entity: Any, schema: TrackedSchema) -> Snapshot:
    """Read the tracked allowlist of ``entity`` into a plain ordered dict."""
    return {
        name: encode_value(kind, getattr(entity, name))
        for name, kind in schema.fields.items()
    }


def diff(prev: Optional[Snapshot], next_: Snapshot) -> List[str]:
    """Return field names whose values differ, in ``next_`` key order.

    With no previous snapshot every non-empty field counts as changed. A key
    present on one side only is a change.
    """
    if prev is None:
        return [name for name, value in next_.items() if value not in (None, [])]
    names = list(next_.keys()) + [name for name in prev.keys() if name not in next_]
    return [name for name in names if prev.get(name, _MISSING) != next_.get(name, _MISSING)]


def decode(snapshot: Snapshot, schema: TrackedSchema) -> Dict[str, Any]:
    """Turn a stored snapshot into column values for every tracked field.

    Fields missing from the snapshot restore to their empty value.
    """
    return coerce_mutation({name: snapshot.get(name) for name in schema.fields}, schema)


def coerce_mutation(mutation: Dict[str, Any], schema: TrackedSchema) -> Dict[str, Any]:
    unknown = [name for name in mutation if name not in schema.fields]
    if unknown:
        raise ValidationError(
            f"{schema.label}에서 변경할 수 없는 필드입니다: {', '.join(unknown)}",
            context={"entity_type": schema.entity_type},
        )
    values: Dict[str, Any] = {}
    for name, value in mutation.items():
        try:
            values[name] = decode_value(schema.fields[name], value)
        except (TypeError, ValueError, InvalidOperation):
            raise ValidationError(
                f"'{name}' 필드 값이 올바르지 않습니다.",
                context={"entity_type": schema.entity_type, "field": name},
            )
        if name in schema.required and values[name] in (None, ""):
            raise ValidationError(
                f"'{name}' 필드는 비워둘 수 없습니다.",
                context={"entity_type": schema.entity_type, "field": name},
            )
    return values
