"""Cache entities package."""

from .protocols import PermissionCache, ManagedCache
from .keys import PermissionCacheKeys, escape_key_part

__all__ = [
    "PermissionCache",
    "ManagedCache",
    "PermissionCacheKeys",
    "escape_key_part",
]
