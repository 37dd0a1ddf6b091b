"""Base exceptions for msp-authz.

This module defines the base exception hierarchy for the msp-authz library.
All exceptions inherit from MspAuthzError and carry an error code, details,
and an HTTP status code mapping for callers that expose decisions over an API.
"""

from typing import Any, Dict, Optional


class MspAuthzError(Exception):
    """Base exception for all msp-authz errors.

    Authorization decisions are never reported through this hierarchy; a denied
    check is a return value. These exceptions describe misconfiguration and
    infrastructure failure only.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code
    """
    from .http_mapping import get_http_status_code as get_mapped_status_code
    return get_mapped_status_code(exception)


def create_error_response(exception: MspAuthzError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The msp-authz exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
