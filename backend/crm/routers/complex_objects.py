"""Complex Objects 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from crm.database import get_db
from crm.middleware.auth_middleware import require_roles
from crm.models.user import User
from crm.routers.history import HistoryOrder, history_response
from crm.schemas.complex_object import ComplexObjectCreate, ComplexObjectOut, ComplexObjectUpdate
from crm.schemas.contract import ContractOut
from crm.schemas.history import EntityHistoryOut
from crm.services import complex_object_service, rollback_service
from crm.services.tracked_entities import COMPLEX_OBJECT
from crm.utils.permissions import ADMIN_ROLES, CRM_ROLES

router = APIRouter(prefix="/api/complex-objects", tags=["complex-objects"])


@router.post("", response_model=ComplexObjectOut)
def create_complex_object(
    data: ComplexObjectCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return complex_object_service.create_complex_object(db, data)


@router.get("", response_model=List[ComplexObjectOut])
def list_complex_objects(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return complex_object_service.list_complex_objects(db)


@router.get("/{complex_object_id}", response_model=ComplexObjectOut)
def get_complex_object(
    complex_object_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return complex_object_service.get_complex_object(db, complex_object_id)


@router.get("/{complex_object_id}/contracts", response_model=List[ContractOut])
def list_complex_object_contracts(
    complex_object_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return complex_object_service.list_contracts(db, complex_object_id)


@router.patch("/{complex_object_id}", response_model=ComplexObjectOut)
def update_complex_object(
    complex_object_id: int,
    data: ComplexObjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return complex_object_service.update_complex_object(db, complex_object_id, data, current_user)


@router.delete("/{complex_object_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_complex_object(
    complex_object_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
):
    complex_object_service.delete_complex_object(db, complex_object_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{complex_object_id}/history", response_model=List[EntityHistoryOut])
def list_complex_object_history(
    complex_object_id: int,
    order: HistoryOrder = HistoryOrder.desc,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    complex_object_service.get_complex_object(db, complex_object_id)
    return history_response(db, COMPLEX_OBJECT, complex_object_id, order)


@router.post("/{complex_object_id}/rollback/{history_id}", response_model=ComplexObjectOut)
def rollback_complex_object(
    complex_object_id: int,
    history_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return rollback_service.rollback_to(db, COMPLEX_OBJECT, complex_object_id, history_id, current_user)
