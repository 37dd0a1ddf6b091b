"""Domain-specific exceptions for msp-authz."""

from .base import MspAuthzError


# Configuration Errors
class ConfigurationError(MspAuthzError):
    """Raised when there's a configuration issue."""
    pass


class InvalidSchemaError(ConfigurationError):
    """Raised when a configured database schema name is not a safe identifier."""
    pass


# Storage Errors
class DatabaseError(MspAuthzError):
    """Base class for errors raised by the read ports."""
    pass


class StoreUnavailableError(DatabaseError):
    """Raised when a backing store cannot answer a read.

    Distinct from a denied decision: callers choose whether to fail closed.
    """
    pass


# Authorization model Errors
class AuthorizationError(MspAuthzError):
    """Base class for errors in the authorization model itself."""
    pass


class PermissionNotFoundError(AuthorizationError):
    """Raised when a permission key is not defined in the registry."""
    pass


class DuplicatePermissionError(AuthorizationError):
    """Raised when a registry is built with the same key twice."""
    pass


class InvalidAccessRequestError(AuthorizationError):
    """Raised when an access request context is malformed."""
    pass
