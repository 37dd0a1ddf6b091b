"""msp-authz - authorization core for the MSP operations platform.

Two layers:
- flat "module.action" permissions resolved through overrides, permission
  roles and base-role defaults
- hierarchical documentation access resolved through access groups whose
  rules narrow from organization to section, category and asset

Logging is not configured on import; applications call ``setup_logging()``
once at startup.
"""

from .__version__ import __version__

from .config import (
    WILDCARD_ORG_ID,
    AccessMode,
    AssignmentType,
    AuthzSettings,
    BaseRole,
    LoggingConfig,
    PermissionSource,
    Section,
    Specificity,
    StoreFailurePolicy,
    get_settings,
    setup_logging,
)

from .core.exceptions import (
    MspAuthzError,
    ConfigurationError,
    InvalidSchemaError,
    DatabaseError,
    StoreUnavailableError,
    AuthorizationError,
    PermissionNotFoundError,
    DuplicatePermissionError,
    InvalidAccessRequestError,
    get_http_status_code,
    create_error_response,
)

from .features.permissions import (
    EffectivePermission,
    PermissionDefinition,
    PermissionKey,
    PermissionRegistry,
    PermissionResolver,
    PermissionRole,
    default_registry,
)

from .features.access import (
    AccessExplanation,
    AccessRequestContext,
    AccessResult,
    AccessRule,
    AllowedScopeResolver,
    BatchAccessResolver,
    GroupAssignment,
    GroupMembershipResolver,
    HierarchicalAccessResolver,
    RuleMatcher,
)

from .infrastructure import InMemoryAuthorizationStore, create_pool

from .services import (
    AuthorizationService,
    create_authorization_service,
    create_postgres_authorization_service,
)

__all__ = [
    "__version__",
    # Configuration
    "WILDCARD_ORG_ID",
    "AccessMode",
    "AssignmentType",
    "AuthzSettings",
    "BaseRole",
    "LoggingConfig",
    "PermissionSource",
    "Section",
    "Specificity",
    "StoreFailurePolicy",
    "get_settings",
    "setup_logging",
    # Exceptions
    "MspAuthzError",
    "ConfigurationError",
    "InvalidSchemaError",
    "DatabaseError",
    "StoreUnavailableError",
    "AuthorizationError",
    "PermissionNotFoundError",
    "DuplicatePermissionError",
    "InvalidAccessRequestError",
    "get_http_status_code",
    "create_error_response",
    # Permissions
    "EffectivePermission",
    "PermissionDefinition",
    "PermissionKey",
    "PermissionRegistry",
    "PermissionResolver",
    "PermissionRole",
    "default_registry",
    # Access
    "AccessExplanation",
    "AccessRequestContext",
    "AccessResult",
    "AccessRule",
    "AllowedScopeResolver",
    "BatchAccessResolver",
    "GroupAssignment",
    "GroupMembershipResolver",
    "HierarchicalAccessResolver",
    "RuleMatcher",
    # Infrastructure
    "InMemoryAuthorizationStore",
    "create_pool",
    # Services
    "AuthorizationService",
    "create_authorization_service",
    "create_postgres_authorization_service",
]
