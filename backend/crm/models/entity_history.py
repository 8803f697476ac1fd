"""추적 대상 엔티티의 변경 이력(append-only)을 저장하는 SQLAlchemy 모델 정의입니다."""

import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from crm.database import Base


class HistoryAction(str, enum.Enum):
    UPDATE = "UPDATE"
    ROLLBACK = "ROLLBACK"


class EntityHistory(Base):
    __tablename__ = "entity_history"

    history_id = Column(Integer, primary_key=True, autoincrement=True)
    entity_type = Column(String(30), nullable=False)  # complex_object/contract/office
    entity_id = Column(Integer, nullable=False)
    action = Column(String(20), nullable=False)
    snapshot = Column(JSON, nullable=False)  # 변경 후 상태
    changed_fields = Column(JSON, nullable=False)
    changed_by = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)
    changed_at = Column(DateTime, nullable=False, server_default=func.now())

    changed_by_user = relationship("User")

    __table_args__ = (
        Index("idx_entity_history_entity", "entity_type", "entity_id", "changed_at"),
    )
