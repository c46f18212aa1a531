from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from app.infrastructure.config import settings


def create_access_token(user_id: int, expires_minutes: Optional[int] = None) -> str:
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.JWT_EXPIRE_MINUTES
    )
    payload = {"user_id": user_id, "exp": expire}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decodes and verifies a bearer token.

    Raises jwt.PyJWTError (ExpiredSignatureError, InvalidTokenError, ...)
    when the token is malformed, tampered with or expired.
    """
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
