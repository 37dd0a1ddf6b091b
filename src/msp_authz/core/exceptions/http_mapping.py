"""HTTP status code mapping for exceptions.

Used by request-handling integrations that surface msp-authz errors over HTTP.
Lookup walks the exception's MRO so subclasses inherit their parent's status.
"""

from typing import Dict, Optional, Type

from .domain import (
    AuthorizationError,
    ConfigurationError,
    DatabaseError,
    DuplicatePermissionError,
    InvalidAccessRequestError,
    InvalidSchemaError,
    PermissionNotFoundError,
    StoreUnavailableError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    InvalidAccessRequestError: 400,

    # 403 Forbidden
    AuthorizationError: 403,

    # 404 Not Found
    PermissionNotFoundError: 404,

    # 500 Internal Server Error
    ConfigurationError: 500,
    InvalidSchemaError: 500,
    DuplicatePermissionError: 500,
    DatabaseError: 500,

    # 503 Service Unavailable
    StoreUnavailableError: 503,
}

DEFAULT_STATUS_CODE = 500


def get_http_status_code(exception: Exception, default: Optional[int] = None) -> int:
    """Get HTTP status code for an exception, honouring subclass inheritance."""
    for exception_type in type(exception).__mro__:
        if exception_type in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exception_type]
    return default if default is not None else DEFAULT_STATUS_CODE
