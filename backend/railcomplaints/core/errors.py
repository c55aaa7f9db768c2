"""
Error taxonomy shared by the services and the API layer.

Services raise these; routes translate them into HTTPException with
as_http_exception(). Each error carries a message that is safe to show
to the client - internal details go to the log, never into the message.
"""

from fastapi import HTTPException, status


class RailComplaintsError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RailComplaintsError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConflictError(RailComplaintsError):
    # 400 rather than 409 to stay compatible with existing clients
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"


class UnauthorizedError(RailComplaintsError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class ForbiddenError(RailComplaintsError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid token"


class NotFoundError(RailComplaintsError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class StorageError(RailComplaintsError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database error occurred"


def as_http_exception(exc: RailComplaintsError) -> HTTPException:
    """Map a service-level error onto the HTTP response FastAPI should send"""
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(status_code=exc.status_code, detail=exc.message, headers=headers)
