"""
FastAPI dependencies and exception handlers for msp-authz.

Dependency factories turn denied decisions into HTTP 403 responses; the
exception handlers map the msp-authz exception hierarchy onto JSON errors.

Usage:
    authz = create_authorization_service(store)

    @router.get("/tickets")
    async def list_tickets(
        principal_id: str = Depends(require_permission(authz, PermissionKey.TICKETS_VIEW, get_current_user_id))
    ):
        ...
"""
import logging
from enum import Enum
from typing import Callable, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from ..config.constants import AccessMode
from ..core.exceptions import InvalidAccessRequestError, MspAuthzError, create_error_response, get_http_status_code
from ..features.access.entities import AccessRequestContext, AccessResult
from ..features.permissions.entities import permission_key_value
from ..services.authorization_service import AuthorizationService

logger = logging.getLogger(__name__)

KeyLike = Union[str, Enum]


def require_permission(
    service: AuthorizationService,
    permission: KeyLike,
    get_principal_id: Callable
) -> Callable:
    """Create a dependency that requires a permission key.

    Args:
        service: Authorization service used for the check
        permission: Permission key (string or PermissionKey member)
        get_principal_id: Dependency yielding the authenticated principal id

    Returns:
        Dependency returning the principal id when the permission is held
    """
    key = permission_key_value(permission)

    async def _check_permission(principal_id: str = Depends(get_principal_id)) -> str:
        if not await service.has_permission(principal_id, key):
            logger.info(f"Principal {principal_id} denied permission {key}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission required: {key}"
            )
        return principal_id

    return _check_permission


def _request_value(request: Request, name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    return request.path_params.get(name) or request.query_params.get(name)


def require_access(
    service: AuthorizationService,
    section: Optional[str],
    get_principal_id: Callable,
    org_param: str = "org_id",
    category_param: Optional[str] = None,
    asset_param: Optional[str] = None,
    write: bool = False,
    permission: Optional[KeyLike] = None
) -> Callable:
    """Create a dependency that requires hierarchical access to a documentation scope.

    The organization, category and asset ids are read from the named path or
    query parameters. With ``write=True`` only READ_WRITE passes. When
    ``permission`` is given it is checked first.
    """
    key = permission_key_value(permission) if permission is not None else None

    async def _check_access(
        request: Request,
        principal_id: str = Depends(get_principal_id)
    ) -> AccessResult:
        if key is not None and not await service.has_permission(principal_id, key):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission required: {key}"
            )

        org_id = _request_value(request, org_param)
        if not org_id:
            raise InvalidAccessRequestError(
                f"Missing organization parameter: {org_param}",
                details={"parameter": org_param},
            )

        context = AccessRequestContext(
            org_id=org_id,
            section=section,
            category_id=_request_value(request, category_param),
            asset_id=_request_value(request, asset_param),
        )
        result = await service.resolve(principal_id, context)

        if not result.allowed or (write and result.mode != AccessMode.READ_WRITE):
            logger.info(f"Principal {principal_id} denied {'write' if write else 'read'} access to {context}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Write access denied" if result.allowed else "Access denied"
            )
        return result

    return _check_access


def register_exception_handlers(app: FastAPI) -> None:
    """Register JSON handlers for msp-authz exceptions.

    Args:
        app: FastAPI application instance
    """
    @app.exception_handler(MspAuthzError)
    async def authz_exception_handler(request: Request, exc: MspAuthzError):
        """Handle msp-authz exceptions through the HTTP status map."""
        status_code = get_http_status_code(exc)
        if status_code >= 500:
            logger.error(f"Authorization failure on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=status_code,
            content=create_error_response(exc)
        )
