"""Offices 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from crm.database import get_db
from crm.middleware.auth_middleware import require_roles
from crm.models.user import User
from crm.routers.history import HistoryOrder, history_response
from crm.schemas.history import EntityHistoryOut
from crm.schemas.office import OfficeCreate, OfficeOut, OfficeUpdate
from crm.services import office_service, rollback_service
from crm.services.tracked_entities import OFFICE
from crm.utils.permissions import ADMIN_ROLES, CRM_ROLES

router = APIRouter(prefix="/api/offices", tags=["offices"])


@router.get("", response_model=List[OfficeOut])
def list_offices(
    include_inactive: bool = True,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return office_service.list_offices(db, include_inactive=include_inactive)


@router.post("", response_model=OfficeOut)
def create_office(
    data: OfficeCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*ADMIN_ROLES)),
):
    return office_service.create_office(db, data)


@router.get("/{office_id}", response_model=OfficeOut)
def get_office(
    office_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return office_service.get_office(db, office_id)


@router.patch("/{office_id}", response_model=OfficeOut)
def update_office(
    office_id: int,
    data: OfficeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
):
    return office_service.update_office(db, office_id, data, current_user)


@router.get("/{office_id}/history", response_model=List[EntityHistoryOut])
def list_office_history(
    office_id: int,
    order: HistoryOrder = HistoryOrder.desc,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    office_service.get_office(db, office_id)
    return history_response(db, OFFICE, office_id, order)


@router.post("/{office_id}/rollback/{history_id}", response_model=OfficeOut)
def rollback_office(
    office_id: int,
    history_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
):
    return rollback_service.rollback_to(db, OFFICE, office_id, history_id, current_user)
