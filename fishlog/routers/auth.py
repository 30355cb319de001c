"""
Authentication router.

Registration, login (JWT), API key management, password changes, the
angler profile and account deletion.
"""

from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from slowapi import Limiter
from slowapi.util import get_remote_address

from fishlog.config import settings
from fishlog.database import get_db
from fishlog.dependencies.auth import get_current_user
from fishlog.schemas.auth import (
    AccountDelete, APIKeyResponse, PasswordChange, Profile, ProfileUpdate,
    TokenResponse, UserCreate, User as UserSchema,
)
from fishlog.models.user import User
from fishlog.crud.user import user as crud_user
from fishlog.utils.logging_config import get_logger
from fishlog.utils.security import verify_password, create_access_token

logger = get_logger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["authentication"],
    responses={401: {"description": "Unauthorized"}},
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


def _api_key_response(user_obj: User) -> APIKeyResponse:
    return APIKeyResponse(
        user_id=user_obj.id,
        email=user_obj.email,
        api_key=user_obj.api_key,
        is_active=user_obj.is_active,
        created_at=user_obj.created_at
    )


@router.post("/login", response_model=TokenResponse)
@limiter.limit("5/minute")
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """
    Authenticate with email (as username) and password.

    Rate limit: 5 requests per minute

    Returns:
        TokenResponse with access token, user info, and expiration

    Raises:
        HTTPException: If credentials are invalid or user is inactive
    """
    user_obj = await crud_user.get_by_email(db, email=form_data.username)

    if not user_obj or not verify_password(form_data.password, user_obj.hashed_password):
        logger.info(f"Failed login attempt for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user_obj.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    access_token = create_access_token(
        user_obj.email,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserSchema.model_validate(user_obj),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    )


@router.post("/register", response_model=APIKeyResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("3/hour")
async def register_user(
    request: Request,
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new angler account and generate an API key.

    Rate limit: 3 requests per hour

    Raises:
        HTTPException: If email is already registered
    """
    try:
        new_user = await crud_user.create(db, obj_in=user_in)
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    logger.info(f"Registered user {new_user.id}")
    return _api_key_response(new_user)


@router.get("/me", response_model=UserSchema)
@limiter.limit("30/minute")
async def get_current_user_info(
    request: Request,
    current_user: User = Depends(get_current_user)
):
    """
    Get the current user's profile and API key.

    Rate limit: 30 requests per minute
    """
    return current_user


@router.post("/apikey/regenerate", response_model=APIKeyResponse)
@limiter.limit("3/hour")
async def regenerate_api_key(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Replace the current user's API key; the old key stops working.

    Rate limit: 3 requests per hour
    """
    updated = await crud_user.regenerate_api_key(db, db_obj=current_user)
    return _api_key_response(updated)


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("5/hour")
async def change_password(
    request: Request,
    body: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Change the current user's password.

    Rate limit: 5 requests per hour
    """
    if not verify_password(body.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )
    await crud_user.set_password(db, db_obj=current_user, password=body.new_password)


@router.get("/profile", response_model=Profile)
@limiter.limit("30/minute")
async def get_profile(
    request: Request,
    current_user: User = Depends(get_current_user)
):
    """The current user's name, address and phone."""
    return current_user


@router.put("/profile", response_model=Profile)
@limiter.limit("10/minute")
async def update_profile(
    request: Request,
    profile_in: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update the current user's profile. The account email cannot be changed here.

    Rate limit: 10 requests per minute
    """
    changes = profile_in.model_dump(exclude_unset=True)
    return await crud_user.update(db, db_obj=current_user, obj_in=changes)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("3/hour")
async def delete_account(
    request: Request,
    body: AccountDelete,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete the current user's account after confirming the password.

    Journal entries, saved rivers, alert rules and licenses go with it.

    Rate limit: 3 requests per hour
    """
    if not verify_password(body.password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Password is incorrect"
        )
    user_id = current_user.id
    await crud_user.remove(db, db_obj=current_user)
    logger.info(f"Deleted account {user_id} at the owner's request")
