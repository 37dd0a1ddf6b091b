"""Application services for msp-authz."""

from .authorization_service import (
    AuthorizationService,
    create_authorization_service,
    create_postgres_authorization_service,
)

__all__ = [
    "AuthorizationService",
    "create_authorization_service",
    "create_postgres_authorization_service",
]
