from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from railcomplaints.core.config import Settings
from railcomplaints.core.errors import ForbiddenError, UnauthorizedError, as_http_exception
from railcomplaints.core.security import PasswordHasher
from railcomplaints.services.session_issuer import Identity, identity_from_token

# Extracts "Authorization: Bearer <token>"; auto_error=False so a missing
# header reaches get_current_identity and gets our 401 instead of FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """
    Authenticate the request from its bearer token.

    No token -> 401. A token that fails signature or expiry checks -> 403.
    The identity comes from the token claims alone and is not cached
    between requests.
    """
    if credentials is None:
        raise as_http_exception(UnauthorizedError("Access token required"))

    try:
        return identity_from_token(credentials.credentials, settings)
    except ForbiddenError as exc:
        raise as_http_exception(exc)
