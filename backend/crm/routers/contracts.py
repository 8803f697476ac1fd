"""Contracts 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from crm.config import settings
from crm.database import get_db
from crm.middleware.auth_middleware import require_roles
from crm.models.contract import ContractStatus
from crm.models.user import User
from crm.routers.history import HistoryOrder, history_response
from crm.schemas.contract import ContractCreate, ContractDetailOut, ContractListOut, ContractOut, ContractUpdate
from crm.schemas.history import EntityHistoryOut
from crm.services import contract_service, rollback_service
from crm.services.tracked_entities import CONTRACT
from crm.utils.permissions import ADMIN_ROLES, CRM_ROLES

router = APIRouter(prefix="/api/contracts", tags=["contracts"])


@router.post("", response_model=ContractOut)
def create_contract(
    data: ContractCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return contract_service.create_contract(db, data)


@router.get("", response_model=ContractListOut)
def list_contracts(
    status_filter: Optional[ContractStatus] = Query(None, alias="status"),
    office_id: Optional[int] = None,
    manager_id: Optional[int] = None,
    complex_object_id: Optional[int] = None,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1),
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return contract_service.list_contracts(
        db,
        status=status_filter.value if status_filter else None,
        office_id=office_id,
        manager_id=manager_id,
        complex_object_id=complex_object_id,
        search=search,
        date_from=date_from,
        date_to=date_to,
        page=page,
        limit=limit,
    )


@router.get("/{contract_id}", response_model=ContractDetailOut)
def get_contract(
    contract_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return contract_service.get_contract_detail(db, contract_id)


@router.patch("/{contract_id}", response_model=ContractOut)
def update_contract(
    contract_id: int,
    data: ContractUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return contract_service.update_contract(db, contract_id, data, current_user)


@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contract(
    contract_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
):
    contract_service.delete_contract(db, contract_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{contract_id}/history", response_model=List[EntityHistoryOut])
def list_contract_history(
    contract_id: int,
    order: HistoryOrder = HistoryOrder.desc,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    contract_service.get_contract(db, contract_id)
    return history_response(db, CONTRACT, contract_id, order)


@router.post("/{contract_id}/rollback/{history_id}", response_model=ContractOut)
def rollback_contract(
    contract_id: int,
    history_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CRM_ROLES)),
):
    return rollback_service.rollback_to(db, CONTRACT, contract_id, history_id, current_user)
