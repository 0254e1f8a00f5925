"""Infrastructure exceptions for workspace-authz.

Errors raised by the membership store and the permission cache adapters.
The resolvers catch these and degrade to the most restrictive answer.
"""

from .base import WorkspaceAuthzError


# Store Errors
class MembershipStoreError(WorkspaceAuthzError):
    """Raised when the membership store cannot be queried or written."""
    pass


# Cache Errors
class CacheError(WorkspaceAuthzError):
    """Base class for cache-related errors."""
    pass


class CacheConnectionError(CacheError):
    """Raised when cache connection fails."""
    pass


class CacheSerializationError(CacheError):
    """Raised when cache value serialization/deserialization fails."""
    pass
