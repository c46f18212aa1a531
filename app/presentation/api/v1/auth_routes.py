import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.infrastructure.db.models.user_model import UserModel
from app.infrastructure.repositories.user_repository import UserRepository
from app.infrastructure.security.jwt_service import create_access_token
from app.infrastructure.security.password_service import hash_password, verify_password
from app.presentation.dependencies import get_db, get_user_profile
from app.presentation.schemas.common import MessageResponse
from app.presentation.schemas.user_schema import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    UpdateProfileRequest,
    UserProfileResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    repo = UserRepository(db)
    try:
        if repo.get_by_email(data.email):
            logger.warning(f"Registration rejected, email already in use: {data.email}")
            raise HTTPException(status_code=400, detail="User already exists with this email")

        user = repo.create(data.name, data.email, hash_password(data.password))
        logger.info(f"Registered user {user.id}")
        return AuthResponse(
            message="User registered successfully",
            token=create_access_token(user.id),
            user=UserProfileResponse.model_validate(user),
        )
    except HTTPException:
        raise
    except IntegrityError:
        db.rollback()
        logger.warning(f"Registration race on email: {data.email}")
        raise HTTPException(status_code=400, detail="User already exists with this email")
    except Exception as e:
        db.rollback()
        logger.error(f"Error during registration: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error during registration")


@router.post("/login", response_model=AuthResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = UserRepository(db).get_by_email(data.email)
    if not user or not verify_password(data.password, user.password_hash):
        logger.warning(f"Failed login attempt for {data.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    logger.info(f"User {user.id} logged in")
    return AuthResponse(
        message="Login successful",
        token=create_access_token(user.id),
        user=UserProfileResponse.model_validate(user),
    )


@router.post("/logout", response_model=MessageResponse)
def logout(user: UserModel = Depends(get_user_profile)):
    # Tokens are stateless; the client discards its copy
    logger.info(f"User {user.id} logged out")
    return MessageResponse(message="Logged out successfully")


@router.get("/profile", response_model=ProfileResponse)
def get_profile(user: UserModel = Depends(get_user_profile)):
    return ProfileResponse(user=UserProfileResponse.model_validate(user))


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    data: UpdateProfileRequest,
    user: UserModel = Depends(get_user_profile),
    db: Session = Depends(get_db),
):
    try:
        user.name = data.name.strip()
        user = UserRepository(db).save(user)
        logger.info(f"User {user.id} updated profile")
        return ProfileResponse(user=UserProfileResponse.model_validate(user))
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating profile for user {user.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error while updating profile")


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    data: ChangePasswordRequest,
    user: UserModel = Depends(get_user_profile),
    db: Session = Depends(get_db),
):
    if not verify_password(data.current_password, user.password_hash):
        logger.warning(f"User {user.id} supplied a wrong current password")
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    try:
        user.password_hash = hash_password(data.new_password)
        UserRepository(db).save(user)
        logger.info(f"User {user.id} changed password")
        return MessageResponse(message="Password changed successfully")
    except Exception as e:
        db.rollback()
        logger.error(f"Error changing password for user {user.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error while changing password")
