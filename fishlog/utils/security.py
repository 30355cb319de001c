"""
Passwords, API keys and access tokens.

Passwords are stored as bcrypt hashes. API keys are random strings stored as
issued so a request can be matched with one indexed lookup. Access tokens
are short-lived JWTs whose subject is the account email.
"""

import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from fishlog.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

API_KEY_PREFIX = "fl_"
API_KEY_ALPHABET = string.ascii_letters + string.digits


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def generate_api_key(length: int = 40) -> str:
    """A new ``fl_``-prefixed API key with ``length`` random characters."""
    return API_KEY_PREFIX + "".join(secrets.choice(API_KEY_ALPHABET) for _ in range(length))


def looks_like_jwt(credentials: str) -> bool:
    """JWTs are three dot-separated segments; API keys contain no dots."""
    return credentials.count(".") == 2


def create_access_token(email: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign an access token for the account with ``email``.

    Args:
        email: Account email, stored as the ``sub`` claim
        expires_delta: Lifetime; ACCESS_TOKEN_EXPIRE_MINUTES when omitted

    Returns:
        Encoded JWT
    """
    issued = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {"sub": email, "iat": issued, "exp": issued + lifetime}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """The email a token was issued to, or None if it is invalid or expired."""
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    return claims.get("sub") or None
