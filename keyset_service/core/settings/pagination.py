"""Pagination settings for keyset (cursor) pagination.

This module provides configurable defaults for cursor pagination. Having
centralized pagination settings keeps the identity field, page size caps
and cursor decoding behaviour consistent across every caller.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_PAGE_SIZE=50, PAGINATION_MAX_PAGE_SIZE=100
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        identity_field: Unique field appended to every sort spec as tie-breaker.
        default_page_size: Page size used by the HTTP dependency when neither
            ``first`` nor ``last`` is supplied.
        max_page_size: Maximum page size accepted by the HTTP dependency.
        cursor_tz_aware: Decode cursor datetimes as timezone-aware UTC values.

    Example:
        settings = PaginationSettings()
        first = min(requested_first, settings.max_page_size)
    """

    identity_field: str = Field(
        default="_id",
        min_length=1,
        description="Unique field used as the final sort key",
    )
    default_page_size: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Default page size when first/last not specified",
    )
    max_page_size: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum allowed page size (hard limit)",
    )
    cursor_tz_aware: bool = Field(
        default=False,
        description="Decode cursor datetimes as timezone-aware (match the driver's tz_aware)",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_default_within_max(self) -> PaginationSettings:
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size must not exceed max_page_size")
        return self
