"""JWT token creation and verification.

HS256 with the shared JWT_SECRET. The payload carries only the user id
(``sub``) plus issue/expiry times; there are no scopes, roles or refresh
tokens, and no revocation: a token is valid until it expires.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.sm_common.errors import InvalidTokenError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(user_id: int) -> str:
    """Issue an access token (default: 60 min)."""
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> int:
    """Decode and validate a token, returning the user id it was issued for.

    Raises:
        InvalidTokenError: Signature mismatch, expired, or no usable ``sub``.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidTokenError() from None

    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub.isdigit():
        raise InvalidTokenError()
    return int(sub)
