from typing import Any, Optional

from sqlalchemy.orm import Session

from crm.exceptions import ValidationError


def ensure_reference(db: Session, model: Any, pk: str, value: Optional[int], label: str) -> None:
    """Reject payload references to rows that do not exist."""
    if value is None:
        return
    if db.query(model).filter(getattr(model, pk) == value).first() is None:
        raise ValidationError(f"존재하지 않는 {label}입니다: {value}", context={pk: value})
