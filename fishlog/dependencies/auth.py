"""
Authentication dependencies.

Requests authenticate either with an API key (``X-API-Key`` header, or
``Authorization: Bearer <api key>``) or with a JWT access token from
``/auth/login`` (``Authorization: Bearer <token>``).
"""

from typing import Optional
from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from fishlog.database import get_db
from fishlog.models.user import User
from fishlog.crud.user import user as user_crud
from fishlog.utils.security import decode_access_token, looks_like_jwt

# Documents the X-API-Key header in Swagger UI
api_key_header_scheme = APIKeyHeader(
    name="X-API-Key",
    scheme_name="ApiKeyAuth",
    auto_error=False
)


def get_credentials_from_request(request: Request) -> str:
    """
    Extract credentials from request headers.

    Supports both Authorization header (Bearer token) and X-API-Key header.

    Raises:
        HTTPException: If no credentials are present
    """
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip()

    api_key = request.headers.get("X-API-Key")
    if api_key:
        return api_key

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required. Provide an API key in the X-API-Key header or a Bearer token",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _user_from_token(db: AsyncSession, token: str) -> Optional[User]:
    email = decode_access_token(token)
    if not email:
        return None
    return await user_crud.get_by_email(db, email=email)


async def get_current_user(
    request: Request,
    _api_key: Optional[str] = Security(api_key_header_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Get the authenticated user.

    Args:
        request: FastAPI request object
        db: Database session

    Returns:
        User instance

    Raises:
        HTTPException: If credentials are missing or invalid, or the user is inactive
    """
    credentials = get_credentials_from_request(request)

    user_obj = await user_crud.get_by_api_key(db, api_key=credentials)
    if not user_obj and looks_like_jwt(credentials):
        user_obj = await _user_from_token(db, credentials)

    if not user_obj:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key or token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user_obj.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Inactive user"
        )

    return user_obj


async def get_current_active_superuser(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    The authenticated user, who must be a superuser.

    Raises:
        HTTPException: 403 for ordinary accounts
    """
    if not await user_crud.is_superuser(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions"
        )
    return current_user
