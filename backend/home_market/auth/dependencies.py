"""
FastAPI dependencies resolving the authenticated principal
"""

from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.logging import get_logger
from .guard import AuthorizationGuard, Principal
from .security import decode_access_token

logger = get_logger(__name__)

security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Principal:
    """Resolve the bearer token to a principal (user id, role, owned shop)."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not credentials:
        raise credentials_exception

    try:
        payload = decode_access_token(credentials.credentials, request.app.state.settings)
        user_id = UUID(payload.get("sub"))
    except (jwt.PyJWTError, TypeError, ValueError) as e:
        logger.info(f"Rejected bearer token: {e}")
        raise credentials_exception

    principal = AuthorizationGuard(db).resolve(user_id)
    if principal is None:
        raise credentials_exception
    return principal


def get_current_active_user(
    current_user: Principal = Depends(get_current_user),
) -> Principal:
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user",
        )
    return current_user


def require_admin(
    current_user: Principal = Depends(get_current_active_user),
) -> Principal:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user
