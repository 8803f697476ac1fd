"""Bearer 토큰을 해석해 현재 CRM 사용자와 역할 권한을 확인하는 의존성 모음입니다."""

import logging
from typing import Iterable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from crm.database import get_db
from crm.models.user import User
from crm.config import settings
from crm.services.auth_service import ALGORITHM

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def read_subject(token: str) -> int:
    """Return the user id carried in the token's ``sub`` claim."""
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise _unauthorized("토큰이 유효하지 않거나 만료되었습니다.")
    subject = claims.get("sub")
    if subject is None or not str(subject).isdigit():
        raise _unauthorized("토큰에 사용자 정보가 없습니다.")
    return int(subject)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    user_id = read_subject(credentials.credentials)
    user = db.query(User).filter(User.user_id == user_id, User.is_active == True).first()  # noqa: E712
    if not user:
        raise _unauthorized("비활성 사용자이거나 존재하지 않는 사용자입니다.")
    return user


def require_roles(*roles: str):
    allowed: Iterable[str] = frozenset(roles)

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.info("[auth] user #%s role=%s denied", current_user.user_id, current_user.role)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="이 작업을 수행할 권한이 없습니다.",
            )
        return current_user

    return checker
