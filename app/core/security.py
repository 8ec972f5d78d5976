from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from .config import get_settings
from .exceptions import UnauthorizedError


@lru_cache
def get_password_context() -> CryptContext:
    settings = get_settings()
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=settings.security.bcrypt_rounds,
    )


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return get_password_context().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return get_password_context().verify(plain_password, hashed_password)


class TokenData(BaseModel):
    """Token data model."""

    user_id: Optional[str] = None
    username: Optional[str] = None
    role: Optional[str] = None
    token_type: str = "access"
    exp: Optional[datetime] = None


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Data to encode in the token
        expires_delta: Custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    to_encode = data.copy()

    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.security.access_token_expire)

    to_encode.update({
        "exp": expire,
        "iat": now,
        "token_type": "access",
    })

    if "sub" not in to_encode and "user_id" in to_encode:
        to_encode["sub"] = str(to_encode.pop("user_id"))

    return jwt.encode(
        to_encode,
        settings.security.secret_key,
        algorithm=settings.security.algorithm
    )


def verify_token(token: str, token_type: str = "access") -> TokenData:
    """
    Verify and decode a JWT token.

    Raises:
        UnauthorizedError: If token is invalid or expired
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.security.secret_key,
            algorithms=[settings.security.algorithm]
        )
    except JWTError:
        raise UnauthorizedError(message="Could not validate credentials")

    if payload.get("token_type") != token_type:
        raise UnauthorizedError(message=f"Invalid token type. Expected {token_type}")

    user_id = payload.get("sub")
    if user_id is None:
        raise UnauthorizedError(message="Token missing user identifier")

    return TokenData(
        user_id=user_id,
        username=payload.get("username"),
        role=payload.get("role"),
        token_type=payload.get("token_type", "access"),
        exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc) if payload.get("exp") else None,
    )


def mask_sensitive_data(data: str, visible_chars: int = 4, mask_char: str = "*") -> str:
    """
    Mask sensitive data for logging or display purposes.

    Args:
        data: Sensitive data to mask
        visible_chars: Number of characters to keep visible at the end
        mask_char: Character to use for masking
    """
    if len(data) <= visible_chars:
        return mask_char * len(data)

    return mask_char * (len(data) - visible_chars) + data[-visible_chars:]
