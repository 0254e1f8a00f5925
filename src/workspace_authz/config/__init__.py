"""Configuration for workspace-authz."""

from .constants import WorkspaceRole, CacheKeys, CacheTTL, ABSENT_MEMBERSHIP
from .settings import PermissionSettings, CacheSettings, CacheBackend
from .logging_config import LoggingConfig, setup_logging

__all__ = [
    # Constants
    "WorkspaceRole",
    "CacheKeys",
    "CacheTTL",
    "ABSENT_MEMBERSHIP",
    
    # Settings
    "PermissionSettings",
    "CacheSettings",
    "CacheBackend",
    
    # Logging
    "LoggingConfig",
    "setup_logging",
]
