"""엔티티 변경 이력(append-only) 저장/조회 공용 기능을 제공하는 도메인 서비스입니다."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crm.exceptions import NotFoundError, PersistenceError
from crm.models.entity_history import EntityHistory, HistoryAction

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def append_entry(
    db: Session,
    *,
    entity_type: str,
    entity_id: int,
    action: HistoryAction,
    snapshot: Dict[str, Any],
    changed_fields: List[str],
    changed_by: Optional[int],
) -> EntityHistory:
    """Add one history row inside the caller's transaction and flush it.

    The caller owns the commit. ``changed_at`` never goes backwards within
    an entity's history.
    """
    try:
        latest = (
            db.query(func.max(EntityHistory.changed_at))
            .filter(
                EntityHistory.entity_type == entity_type,
                EntityHistory.entity_id == entity_id,
            )
            .scalar()
        )
        changed_at = _utcnow()
        if latest is not None and latest > changed_at:
            changed_at = latest

        row = EntityHistory(
            entity_type=entity_type,
            entity_id=entity_id,
            action=HistoryAction(action).value,
            snapshot=dict(snapshot),
            changed_fields=list(changed_fields),
            changed_by=changed_by,
            changed_at=changed_at,
        )
        db.add(row)
        db.flush()
    except SQLAlchemyError as exc:
        logger.warning("[history] append rejected for %s #%s: %s", entity_type, entity_id, exc)
        raise PersistenceError(
            "변경 이력을 저장하지 못했습니다.",
            context={"entity_type": entity_type, "entity_id": entity_id},
        ) from exc
    return row


def list_entries(db: Session, *, entity_type: str, entity_id: int) -> List[EntityHistory]:
    return (
        db.query(EntityHistory)
        .filter(
            EntityHistory.entity_type == entity_type,
            EntityHistory.entity_id == entity_id,
        )
        .order_by(EntityHistory.changed_at.asc(), EntityHistory.history_id.asc())
        .all()
    )


def get_entry(db: Session, history_id: int) -> EntityHistory:
    row = db.query(EntityHistory).filter(EntityHistory.history_id == history_id).first()
    if not row:
        raise NotFoundError("변경 이력을 찾을 수 없습니다.", context={"history_id": history_id})
    return row


def purge_entity(db: Session, *, entity_type: str, entity_id: int) -> int:
    # 엔티티 삭제 시에만 호출된다. commit은 호출자가 한다.
    return (
        db.query(EntityHistory)
        .filter(
            EntityHistory.entity_type == entity_type,
            EntityHistory.entity_id == entity_id,
        )
        .delete(synchronize_session=False)
    )


def _user_brief(row: EntityHistory) -> Optional[Dict[str, Any]]:
    user = row.changed_by_user
    if user is None:
        return None
    return {
        "user_id": user.user_id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
    }


def to_response(row: EntityHistory) -> Dict[str, Any]:
    return {
        "history_id": row.history_id,
        "entity_type": row.entity_type,
        "entity_id": row.entity_id,
        "action": row.action,
        "snapshot": row.snapshot or {},
        "changed_fields": row.changed_fields or [],
        "changed_by": row.changed_by,
        "changed_by_user": _user_brief(row),
        "changed_at": row.changed_at,
    }
