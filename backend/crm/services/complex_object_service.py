"""Complex Object Service 도메인 서비스 레이어입니다. 객체 CRUD와 이력 추적 변경을 담당합니다."""

import logging
from typing import List

from sqlalchemy.orm import Session

from crm.exceptions import NotFoundError, ValidationError
from crm.models.complex_object import ComplexObject
from crm.models.contract import Contract
from crm.models.user import User
from crm.schemas.complex_object import ComplexObjectCreate, ComplexObjectUpdate
from crm.services import change_tracker, history_service
from crm.services.tracked_entities import COMPLEX_OBJECT, CONTRACT

logger = logging.getLogger(__name__)


def create_complex_object(db: Session, data: ComplexObjectCreate) -> ComplexObject:
    if not data.name.strip():
        raise ValidationError("객체 이름은 비워둘 수 없습니다.")
    values = data.model_dump()
    COMPLEX_OBJECT.check_references(db, values)
    obj = ComplexObject(**values)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    logger.info("[complex-objects] object #%s created", obj.complex_object_id)
    return obj


def list_complex_objects(db: Session) -> List[ComplexObject]:
    return db.query(ComplexObject).order_by(ComplexObject.created_at.desc(), ComplexObject.complex_object_id.desc()).all()


def get_complex_object(db: Session, complex_object_id: int) -> ComplexObject:
    obj = db.query(ComplexObject).filter(ComplexObject.complex_object_id == complex_object_id).first()
    if not obj:
        raise NotFoundError("객체를 찾을 수 없습니다.", context={"complex_object_id": complex_object_id})
    return obj


def update_complex_object(db: Session, complex_object_id: int, data: ComplexObjectUpdate, actor: User) -> ComplexObject:
    mutation = data.model_dump(exclude_unset=True, mode="json")
    get_complex_object(db, complex_object_id)
    return change_tracker.tracked_update(db, COMPLEX_OBJECT, complex_object_id, mutation, actor)


def list_contracts(db: Session, complex_object_id: int) -> List[Contract]:
    get_complex_object(db, complex_object_id)
    return (
        db.query(Contract)
        .filter(Contract.complex_object_id == complex_object_id)
        .order_by(Contract.contract_date.asc(), Contract.contract_id.asc())
        .all()
    )


def delete_complex_object(db: Session, complex_object_id: int, actor: User) -> None:
    obj = get_complex_object(db, complex_object_id)
    # 연결된 계약은 먼저 분리한다. 분리도 계약 이력에 남긴다.
    for contract in list_contracts(db, complex_object_id):
        change_tracker.tracked_update(
            db,
            CONTRACT,
            contract.contract_id,
            {"complex_object_id": None},
            actor,
            commit=False,
        )
    history_service.purge_entity(db, entity_type=COMPLEX_OBJECT.entity_type, entity_id=complex_object_id)
    db.delete(obj)
    db.commit()
    logger.info("[complex-objects] object #%s deleted by=%s", complex_object_id, actor.user_id)
