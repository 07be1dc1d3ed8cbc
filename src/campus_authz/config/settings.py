"""
Configuration management for the campus authorization engine.

Environment-driven settings for the permission store, the permission cache
and the enforcement gate.
"""
import json
from typing import Annotated, Optional, List, Dict, Any
from functools import lru_cache
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import Field, field_validator

from .constants import CacheTTL, Timeouts, DEFAULT_ELEVATED_ROLE_LABELS


class AuthzSettings(BaseSettings):
    """Settings for the authorization engine and its two backends."""

    model_config = SettingsConfigDict(
        env_prefix="AUTHZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_name: str = Field(default="campus-authz")
    environment: str = Field(default="development")

    # Permission store (PostgreSQL)
    database_url: Optional[str] = Field(default=None)
    db_schema: str = Field(default="public")
    db_pool_min_size: int = Field(default=1, ge=1)
    db_pool_max_size: int = Field(default=10, ge=1)

    # Permission cache (Redis); in-memory cache is used when unset
    redis_url: Optional[str] = Field(default=None)
    cache_key_prefix: str = Field(default="")
    cache_ttl_permissions: int = Field(default=CacheTTL.PERMISSIONS, gt=0)
    memory_cache_max_size: int = Field(default=10000, gt=0)

    # Timeouts for the two I/O boundaries of a check
    cache_timeout_seconds: float = Field(default=Timeouts.CACHE_OPERATION, gt=0)
    store_timeout_seconds: float = Field(default=Timeouts.STORE_QUERY, gt=0)

    # Decision engine
    bypass_role_labels: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: sorted(DEFAULT_ELEVATED_ROLE_LABELS)
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_verbosity: str = Field(default="NORMAL")
    log_format: str = Field(default="simple")

    @field_validator("bypass_role_labels", mode="before")
    @classmethod
    def _split_labels(cls, value: Any) -> Any:
        """Accept a JSON list or a comma separated string from the environment."""
        if isinstance(value, str):
            if value.strip().startswith("["):
                return json.loads(value)
            return [label.strip() for label in value.split(",") if label.strip()]
        return value

    @property
    def is_cache_enabled(self) -> bool:
        """Check if Redis caching is configured."""
        return self.redis_url is not None

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_engine_config(self) -> Dict[str, Any]:
        """Get the keyword arguments for the enforcement gate."""
        return {
            "cache_ttl_seconds": self.cache_ttl_permissions,
            "cache_timeout": self.cache_timeout_seconds,
            "store_timeout": self.store_timeout_seconds,
        }


@lru_cache()
def get_settings() -> AuthzSettings:
    """Get cached settings instance."""
    return AuthzSettings()
