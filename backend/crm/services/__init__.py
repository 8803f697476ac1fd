"""서비스 레이어 패키지 초기화 모듈입니다."""

from crm.services import (
    auth_service,
    snapshot_codec,
    history_service,
    change_tracker,
    rollback_service,
    office_service,
    complex_object_service,
    contract_service,
    contract_payment_service,
)
