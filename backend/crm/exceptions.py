"""CRM 도메인 예외 계층입니다. 라우터 경계에서 HTTP 상태 코드로 변환됩니다."""

from typing import Any, Dict, Optional


class CrmError(Exception):
    """Base error for history, rollback and payment operations.

    ``status_code`` is the HTTP status the API boundary answers with;
    ``context`` carries identifiers for logging.
    """

    status_code = 500

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class NotFoundError(CrmError):
    """Entity or history entry does not exist."""

    status_code = 404


class ValidationError(CrmError):
    """Malformed mutation payload or non-positive payment amount."""

    status_code = 400


class InvalidOperationError(CrmError):
    """Operation not allowed in the current state, e.g. rolling back to a rollback."""

    status_code = 409


class PersistenceError(CrmError):
    """The store rejected a transactional write."""

    status_code = 500
