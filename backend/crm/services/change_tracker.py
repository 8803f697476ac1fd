"""추적 대상 엔티티의 변경을 적용하고 실제 변경이 있을 때만 이력을 남깁니다."""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crm.exceptions import CrmError, NotFoundError, PersistenceError
from crm.models.entity_history import HistoryAction
from crm.models.user import User
from crm.services import history_service, snapshot_codec
from crm.services.tracked_entities import TrackedSchema

logger = logging.getLogger(__name__)


def tracked_update(
    db: Session,
    schema: TrackedSchema,
    entity_id: int,
    mutation: Dict[str, Any],
    actor: Optional[User],
    *,
    action: HistoryAction = HistoryAction.UPDATE,
    commit: bool = True,
) -> Any:
    """Apply a partial update and append at most one history entry.

    The entity update and the history row are committed together; on any
    store failure the session is rolled back and neither takes effect.
    With ``commit=False`` both are only flushed and the caller commits.
    """
    entity = schema.load(db, entity_id, for_update=True)
    if entity is None:
        raise NotFoundError(
            f"{schema.label} #{entity_id}을(를) 찾을 수 없습니다.",
            context={"entity_type": schema.entity_type, "entity_id": entity_id},
        )
    values = snapshot_codec.coerce_mutation(mutation, schema)
    schema.check_references(db, values)

    try:
        before = snapshot_codec.capture(entity, schema)
        for name, value in values.items():
            setattr(entity, name, value)
        db.flush()

        after = snapshot_codec.capture(entity, schema)
        changed_fields = snapshot_codec.diff(before, after)
        if changed_fields:
            history_service.append_entry(
                db,
                entity_type=schema.entity_type,
                entity_id=entity_id,
                action=action,
                snapshot=after,
                changed_fields=changed_fields,
                changed_by=actor.user_id if actor is not None else None,
            )
        if commit:
            db.commit()
    except CrmError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("[history] %s #%s update rejected: %s", schema.entity_type, entity_id, exc)
        raise PersistenceError(
            f"{schema.label} 변경 내용을 저장하지 못했습니다.",
            context={"entity_type": schema.entity_type, "entity_id": entity_id},
        ) from exc

    if changed_fields:
        logger.info(
            "[history] %s #%s %s fields=%s by=%s",
            schema.entity_type,
            entity_id,
            HistoryAction(action).value,
            ",".join(changed_fields),
            actor.user_id if actor is not None else None,
        )
    if commit:
        db.refresh(entity)
    return entity
