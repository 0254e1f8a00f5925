"""Cache services package."""

from .cache_service import PendingFill, PermissionCacheService
from .single_flight import SingleFlight

__all__ = [
    "PendingFill",
    "PermissionCacheService",
    "SingleFlight",
]
