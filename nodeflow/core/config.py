"""Environment-driven configuration with Pydantic v2."""

from typing import List, Literal, Optional
from pathlib import Path
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from nodeflow.constants import (
    DEFAULT_EXECUTION_TIMEOUT,
    MANIFEST_CACHE_KEY,
    MANIFEST_CACHE_TTL,
)


class Settings(BaseSettings):
    """Node catalog settings driven entirely by environment variables."""

    # Logging
    log_level: str = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="json")
    log_file: Optional[str] = Field(default=None)

    # Cache Configuration
    redis_url: Optional[str] = Field(default=None)
    redis_enabled: bool = Field(default=False)
    cache_ttl: int = Field(default=3600, ge=60)

    # Node Manifest
    manifest_cache_key: str = Field(default=MANIFEST_CACHE_KEY, min_length=1)
    manifest_cache_ttl: int = Field(default=MANIFEST_CACHE_TTL, ge=1)
    manifest_auto_invalidate: bool = Field(default=False)

    # Execution Context
    default_execution_timeout: int = Field(default=DEFAULT_EXECUTION_TIMEOUT, ge=1)

    # Packages scanned for BaseNode subclasses at startup
    node_packages: List[str] = Field(default_factory=list)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_file")
    @classmethod
    def validate_log_file(cls, v):
        """Ensure log directory exists."""
        if v:
            Path(v).parent.mkdir(parents=True, exist_ok=True)
        return v

    @property
    def use_redis(self) -> bool:
        """Check if the Redis cache backend is configured."""
        return self.redis_enabled and bool(self.redis_url)

    model_config = {
        "env_prefix": "NODEFLOW_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "env_parse_none_str": "none",
        "env_nested_delimiter": "__",
    }
