"""FastAPI dependency: get_current_user_id.

Usage in any protected router:
    from src.sm_gateway.auth.dependencies import get_current_user_id

    @router.get("/protected")
    async def protected(user_id: int = Depends(get_current_user_id)):
        ...
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.sm_common.errors import MissingTokenError
from src.sm_gateway.auth.jwt_handler import decode_token

# auto_error=False: a missing header is a 403 here, not FastAPI's default
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> int:
    """Extract and verify the Bearer token, return the user id it carries.

    Raises MissingTokenError (403) when no Bearer token is sent and
    InvalidTokenError (401) when the token is invalid or expired.
    The user row is not loaded; handlers that need it query for it.
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()
    return decode_token(credentials.credentials)
