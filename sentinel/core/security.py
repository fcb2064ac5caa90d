from datetime import datetime, timedelta, timezone
from typing import Any, Union

from jose import JWTError, jwt

from sentinel.core.config import settings

ALGORITHM = "HS256"
OPERATOR_SCOPE = "operator"


def create_access_token(
    subject: Union[str, Any],
    expires_delta: Union[timedelta, None] = None,
    scope: str = OPERATOR_SCOPE,
) -> str:
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode = {"exp": expire, "sub": str(subject), "scope": scope}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Return the token claims, or None when the signature or expiry is invalid."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
