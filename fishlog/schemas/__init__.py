# Pydantic schemas package

from fishlog.schemas.base import BaseSchema, TimestampSchema, IDSchema
from fishlog.schemas.auth import (
    Token, User, UserCreate, PasswordChange, APIKeyResponse, TokenResponse
)

__all__ = [
    "BaseSchema", "TimestampSchema", "IDSchema",
    "Token", "User", "UserCreate", "PasswordChange", "APIKeyResponse", "TokenResponse",
]
