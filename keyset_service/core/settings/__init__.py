"""Modular Pydantic Settings v2 configuration.

Import settings via cached loaders:
    from keyset_service.core.settings import get_pagination_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables (production)
    3. .env file (development only)
"""

from __future__ import annotations

from .loader import (
    clear_all_caches,
    get_logging_settings,
    get_mongo_settings,
    get_pagination_settings,
)
from .logs import LoggingSettings
from .mongo import MongoSettings
from .pagination import PaginationSettings

__all__ = [
    "LoggingSettings",
    "MongoSettings",
    "PaginationSettings",
    "clear_all_caches",
    "get_logging_settings",
    "get_mongo_settings",
    "get_pagination_settings",
]
