"""Exceptions module for msp-authz.

This module provides the complete exception hierarchy for msp-authz,
split into the base error type, domain errors, and HTTP status mapping.
"""

from .base import (
    MspAuthzError,
    get_http_status_code,
    create_error_response,
)

from .domain import (
    # Configuration Errors
    ConfigurationError,
    InvalidSchemaError,

    # Storage Errors
    DatabaseError,
    StoreUnavailableError,

    # Authorization model Errors
    AuthorizationError,
    PermissionNotFoundError,
    DuplicatePermissionError,
    InvalidAccessRequestError,
)

from .http_mapping import HTTP_STATUS_MAP

__all__ = [
    "MspAuthzError",
    "get_http_status_code",
    "create_error_response",
    "ConfigurationError",
    "InvalidSchemaError",
    "DatabaseError",
    "StoreUnavailableError",
    "AuthorizationError",
    "PermissionNotFoundError",
    "DuplicatePermissionError",
    "InvalidAccessRequestError",
    "HTTP_STATUS_MAP",
]
