"""
Settings for the his-commons repository layer.

Values are read from the environment (prefix ``HIS_``) or a local ``.env``
file, so every domain service configures its store the same way.
"""
from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

from .constants import PaginationDefaults


class HisCommonsSettings(BaseSettings):
    """Store and query settings shared by every domain service."""

    model_config = SettingsConfigDict(
        env_prefix="HIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Document store
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    mongodb_database: str = Field(default="his")
    mongodb_max_pool_size: int = Field(default=100, ge=1)
    mongodb_server_selection_timeout_ms: int = Field(default=5000, ge=1)

    # Querying
    query_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    default_page_size: int = Field(default=PaginationDefaults.PAGE_SIZE)

    # Provenance tag stamped by domain services on records they create
    source_system: Optional[str] = Field(default=None)

    @field_validator("default_page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """Keep page sizes within the wire contract bounds."""
        if v < PaginationDefaults.MIN_PAGE_SIZE or v > PaginationDefaults.MAX_PAGE_SIZE:
            raise ValueError(
                f"Page size must be between {PaginationDefaults.MIN_PAGE_SIZE} "
                f"and {PaginationDefaults.MAX_PAGE_SIZE}"
            )
        return v


@lru_cache()
def get_settings() -> HisCommonsSettings:
    """Get cached settings instance."""
    return HisCommonsSettings()
