"""
Bearer token encoding and decoding
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import jwt

from ..config import Settings
from ..enums.user import UserRole


def create_access_token(
    user_id: UUID,
    role: UserRole,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {
        "sub": str(user_id),
        "role": UserRole(role).value,
        "exp": expire,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Settings) -> dict:
    """Decode and verify a token; raises ``jwt.PyJWTError`` when invalid or expired."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
