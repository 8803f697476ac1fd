"""Office Service 도메인 서비스 레이어입니다."""

import logging
from typing import List

from sqlalchemy.orm import Session

from crm.exceptions import NotFoundError, ValidationError
from crm.models.office import Office
from crm.models.user import User
from crm.schemas.office import OfficeCreate, OfficeUpdate
from crm.services import change_tracker
from crm.services.tracked_entities import OFFICE

logger = logging.getLogger(__name__)


def create_office(db: Session, data: OfficeCreate) -> Office:
    if not data.name.strip():
        raise ValidationError("사무소 이름은 비워둘 수 없습니다.")
    office = Office(**data.model_dump())
    db.add(office)
    db.commit()
    db.refresh(office)
    logger.info("[offices] office #%s created", office.office_id)
    return office


def list_offices(db: Session, *, include_inactive: bool = True) -> List[Office]:
    q = db.query(Office)
    if not include_inactive:
        q = q.filter(Office.is_active == True)  # noqa: E712
    return q.order_by(Office.sort_order.asc(), Office.name.asc()).all()


def get_office(db: Session, office_id: int) -> Office:
    office = db.query(Office).filter(Office.office_id == office_id).first()
    if not office:
        raise NotFoundError("사무소를 찾을 수 없습니다.", context={"office_id": office_id})
    return office


def update_office(db: Session, office_id: int, data: OfficeUpdate, actor: User) -> Office:
    mutation = data.model_dump(exclude_unset=True, mode="json")
    return change_tracker.tracked_update(db, OFFICE, office_id, mutation, actor)
