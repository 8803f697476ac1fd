"""이력 조회 라우트에서 공용으로 쓰는 헬퍼입니다."""

from enum import Enum
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from crm.services import history_service
from crm.services.tracked_entities import TrackedSchema


class HistoryOrder(str, Enum):
    asc = "asc"
    desc = "desc"


def history_response(db: Session, schema: TrackedSchema, entity_id: int, order: HistoryOrder) -> List[Dict[str, Any]]:
    rows = history_service.list_entries(db, entity_type=schema.entity_type, entity_id=entity_id)
    if order == HistoryOrder.desc:
        rows = list(reversed(rows))
    return [history_service.to_response(row) for row in rows]
