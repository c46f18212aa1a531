import logging
from functools import lru_cache
from typing import Iterator, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.application.results_service import ResultService
from app.infrastructure.db.models.user_model import UserModel
from app.infrastructure.db.session import SessionLocal
from app.infrastructure.repositories.user_repository import UserRepository
from app.infrastructure.security.jwt_service import decode_access_token
from app.infrastructure.trivia.trivia_client import TriviaClient

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported as 401, not 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_user_profile(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> UserModel:
    if not credentials or not credentials.credentials:
        raise _unauthorized("No token, authorization denied")

    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError as e:
        logger.warning(f"Token validation failed: {e}")
        raise _unauthorized("Token is not valid")

    user_id = payload.get("user_id")
    if not user_id:
        raise _unauthorized("Invalid token payload")

    # Tokens outlive accounts; make sure the owner still exists
    user = UserRepository(db).get_by_id(user_id)
    if not user:
        logger.warning(f"Token presented for missing user_id: {user_id}")
        raise _unauthorized("User not found")

    logger.debug(f"Validated token for user_id: {user.id}")
    return user


def get_current_user(user: UserModel = Depends(get_user_profile)) -> dict:
    return {"user_id": user.id, "email": user.email}


@lru_cache
def get_trivia_client() -> TriviaClient:
    return TriviaClient()


def get_result_service(db: Session = Depends(get_db)) -> ResultService:
    return ResultService(db)
