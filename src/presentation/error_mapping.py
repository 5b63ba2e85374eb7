"""Domain error to HTTP response mapping.

Builds RFC 9457 Problem Details responses from ``DomainError`` values.
Status codes come from the error code where one is listed, otherwise from
the error class.

Usage:
    result = await handler.handle(command)
    if isinstance(result, Failure):
        return ErrorResponseBuilder.from_domain_error(result.error, request)
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from src.core.enums import ErrorCode
from src.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

CODE_STATUS: dict[ErrorCode, int] = {
    ErrorCode.ACCOUNT_LOCKED: status.HTTP_423_LOCKED,
    ErrorCode.LOGIN_DENIED_BY_RISK: status.HTTP_403_FORBIDDEN,
    ErrorCode.EMAIL_NOT_VERIFIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.AUDIT_RECORD_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.CACHE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.NOTIFICATION_ENQUEUE_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
}

CLASS_STATUS: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
)

TITLES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "Validation Failed",
    status.HTTP_401_UNAUTHORIZED: "Authentication Required",
    status.HTTP_403_FORBIDDEN: "Access Denied",
    status.HTTP_404_NOT_FOUND: "Resource Not Found",
    status.HTTP_409_CONFLICT: "Resource Conflict",
    status.HTTP_423_LOCKED: "Account Locked",
    status.HTTP_503_SERVICE_UNAVAILABLE: "Service Unavailable",
}


def status_for(error: DomainError) -> int:
    """HTTP status code for a domain error.

    Example:
        >>> status_for(NotFoundError(code=ErrorCode.SESSION_NOT_FOUND, message="...",
        ...                          resource_type="Session", resource_id="..."))
        404
    """
    if error.code in CODE_STATUS:
        return CODE_STATUS[error.code]
    for error_type, status_code in CLASS_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class ErrorResponseBuilder:
    """Build RFC 9457 Problem Details error responses."""

    @staticmethod
    def from_domain_error(error: DomainError, request: Request) -> JSONResponse:
        """Convert a DomainError to a JSON response.

        Args:
            error: Failure payload from a handler.
            request: Current request (for the ``instance`` member).

        Returns:
            JSONResponse with Problem Details content. Unauthenticated
            responses carry ``WWW-Authenticate: Bearer``.
        """
        status_code = status_for(error)
        problem: dict[str, object] = {
            "type": f"/errors/{error.code.value}",
            "title": TITLES.get(status_code, "Internal Server Error"),
            "status": status_code,
            "detail": error.message,
            "instance": str(request.url.path),
            "code": error.code.value,
        }
        if isinstance(error, ValidationError) and error.field:
            problem["errors"] = [
                {"field": error.field, "code": error.code.value, "message": error.message}
            ]

        headers = (
            {"WWW-Authenticate": "Bearer"}
            if status_code == status.HTTP_401_UNAUTHORIZED
            else None
        )
        return JSONResponse(status_code=status_code, content=problem, headers=headers)
