"""변경 이력 스냅샷으로 엔티티를 되돌리는 롤백 서비스입니다."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from crm.exceptions import InvalidOperationError, NotFoundError
from crm.models.entity_history import HistoryAction
from crm.models.user import User
from crm.services import change_tracker, history_service, snapshot_codec
from crm.services.tracked_entities import TrackedSchema

logger = logging.getLogger(__name__)


def rollback_to(db: Session, schema: TrackedSchema, entity_id: int, history_id: int, actor: User) -> Any:
    """Restore every tracked field of the entity to the target entry's snapshot.

    The restore goes through ``tracked_update`` and is logged as a new
    ``ROLLBACK`` entry; earlier entries stay untouched. Only ``UPDATE``
    entries are valid targets.
    """
    if schema.load(db, entity_id) is None:
        raise NotFoundError(
            f"{schema.label} #{entity_id}을(를) 찾을 수 없습니다.",
            context={"entity_type": schema.entity_type, "entity_id": entity_id},
        )
    try:
        target = history_service.get_entry(db, history_id)
    except NotFoundError:
        target = None
    if target is None or target.entity_type != schema.entity_type or target.entity_id != entity_id:
        raise NotFoundError(
            f"{schema.label} #{entity_id}의 변경 이력 #{history_id}을(를) 찾을 수 없습니다.",
            context={"entity_type": schema.entity_type, "entity_id": entity_id, "history_id": history_id},
        )
    if target.action == HistoryAction.ROLLBACK.value:
        raise InvalidOperationError(
            "롤백 이력으로는 되돌릴 수 없습니다. 원래 변경 이력을 선택하세요.",
            context={"history_id": history_id},
        )

    mutation = snapshot_codec.decode(target.snapshot or {}, schema)
    entity = change_tracker.tracked_update(
        db,
        schema,
        entity_id,
        mutation,
        actor,
        action=HistoryAction.ROLLBACK,
    )
    logger.info(
        "[rollback] %s #%s restored to history #%s by=%s",
        schema.entity_type,
        entity_id,
        history_id,
        actor.user_id,
    )
    return entity
