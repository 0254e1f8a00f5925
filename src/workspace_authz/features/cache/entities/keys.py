"""Cache key construction for permission entries.

Every identifier that scopes a value is embedded in its key. Components are
percent-escaped so ``:`` never appears unescaped inside one; this keeps keys
for different (user, workspace) pairs distinct whatever the identifiers
contain. UUIDs and slugs render verbatim, e.g. ``membership:{ws}:{user}``.
"""

from typing import Any
from urllib.parse import quote

from ....config.constants import CacheKeys


def escape_key_part(part: Any) -> str:
    """Escape one key component; only ``[A-Za-z0-9_.~-]`` is left as-is."""
    return quote(str(part), safe="")


class PermissionCacheKeys:
    """Builds the cache keys used by the resolvers and the mutator."""
    
    def __init__(self, prefix: str = ""):
        self.prefix = prefix
    
    def _build(self, pattern: str, **parts: Any) -> str:
        key = pattern.format(**{name: escape_key_part(value) for name, value in parts.items()})
        if self.prefix:
            return f"{escape_key_part(self.prefix)}:{key}"
        return key
    
    def membership(self, workspace_id: str, user_id: str) -> str:
        return self._build(CacheKeys.MEMBERSHIP, workspace_id=workspace_id, user_id=user_id)
    
    def user_permissions(self, user_id: str, workspace_id: str) -> str:
        return self._build(CacheKeys.USER_PERMISSIONS, user_id=user_id, workspace_id=workspace_id)
    
    def user_context_permissions(self, user_id: str) -> str:
        return self._build(CacheKeys.USER_CONTEXT_PERMISSIONS, user_id=user_id)
    
    def for_membership_change(self, workspace_id: str, user_id: str) -> list:
        """Every key whose value depends on one (user, workspace) membership."""
        return [
            self.membership(workspace_id, user_id),
            self.user_permissions(user_id, workspace_id),
            self.user_context_permissions(user_id),
        ]
