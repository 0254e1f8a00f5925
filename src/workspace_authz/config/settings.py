"""Settings for workspace-authz.

Both settings classes are plain pydantic-settings models so services can
override any value from the environment or construct them explicitly in tests.
"""

from enum import Enum

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import CacheTTL


class CacheBackend(str, Enum):
    """Supported cache backends."""
    
    REDIS = "redis"
    MEMORY = "memory"


class PermissionSettings(BaseSettings):
    """TTLs and key namespacing for the permission resolvers."""
    
    model_config = SettingsConfigDict(
        env_prefix="WORKSPACE_AUTHZ_",
        case_sensitive=False,
        extra="ignore"
    )
    
    membership_ttl_seconds: int = Field(default=CacheTTL.MEMBERSHIP, ge=1, description="Membership record TTL")
    permissions_ttl_seconds: int = Field(default=CacheTTL.MEMBER_PERMISSIONS, ge=1, description="Permission snapshot TTL")
    negative_ttl_seconds: int = Field(default=CacheTTL.NON_MEMBER, ge=1, description="TTL for absent members and empty snapshots")
    context_ttl_seconds: int = Field(default=CacheTTL.CONTEXT_PERMISSIONS, ge=1, description="Cross-workspace context map TTL")
    key_prefix: str = Field(default="", description="Namespace prepended to every cache key")
    single_flight_enabled: bool = Field(default=True, description="Coalesce concurrent identical store lookups")
    
    @model_validator(mode="after")
    def validate_negative_ttl(self) -> "PermissionSettings":
        """Negative results must never outlive positive ones."""
        shortest_positive = min(
            self.membership_ttl_seconds,
            self.permissions_ttl_seconds,
            self.context_ttl_seconds,
        )
        if self.negative_ttl_seconds > shortest_positive:
            raise ValueError(
                f"negative_ttl_seconds ({self.negative_ttl_seconds}) must not exceed "
                f"the positive TTLs ({shortest_positive})"
            )
        return self


class CacheSettings(BaseSettings):
    """Cache backend selection and connection settings."""
    
    model_config = SettingsConfigDict(
        env_prefix="WORKSPACE_AUTHZ_CACHE_",
        case_sensitive=False,
        extra="ignore"
    )
    
    backend: CacheBackend = Field(default=CacheBackend.REDIS, description="Cache backend")
    
    # Redis configuration
    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")
    redis_max_connections: int = Field(default=50, ge=1, description="Max Redis connections")
    redis_connection_timeout: float = Field(default=5.0, gt=0, description="Redis connection timeout")
    redis_command_timeout: float = Field(default=3.0, gt=0, description="Redis command timeout")
    
    # Memory cache configuration
    memory_max_size: int = Field(default=10000, ge=1, description="Max memory cache entries")
