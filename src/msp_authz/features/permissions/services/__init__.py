"""Permission services package.

Resolution services for flat permission keys.
"""

from .permission_resolver import PermissionResolver

__all__ = [
    "PermissionResolver",
]
