"""엔티티 변경 이력 응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from crm.schemas.user import UserBrief


class EntityHistoryOut(BaseModel):
    history_id: int
    entity_type: str
    entity_id: int
    action: str
    snapshot: Dict[str, Any]
    changed_fields: List[str]
    changed_by: Optional[int] = None
    changed_by_user: Optional[UserBrief] = None
    changed_at: datetime
