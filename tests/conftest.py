"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings isolation between tests
    - Schema Fixtures: collection schema for the planet dataset
    - Store Fixtures: seeded in-memory query executor and paginator
    - Logging Fixtures: teardown of the queue listener

When adding new features:
    1. Add fixtures to the appropriate section below
    2. Use @pytest.fixture with clear docstrings
    3. Make fixtures composable (fixtures can depend on other fixtures)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from typing import Any

import pytest

from keyset_service.core.database import CollectionSchema, FieldSpec, FieldType
from keyset_service.core.pagination import KeysetPaginator
from keyset_service.core.settings import PaginationSettings, clear_all_caches
from keyset_service.infra.logging import shutdown
from tests.fixtures.memory_store import MemoryQueryExecutor
from tests.fixtures.planets import planet_documents

# Keep a developer's local environment out of the settings under test
for _name in list(os.environ):
    if _name.startswith(("PAGINATION_", "LOG_", "MONGO_")):
        del os.environ[_name]


# ============================================================================
# Environment
# ============================================================================


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    """Drop cached settings so env changes in one test never leak."""
    clear_all_caches()
    yield
    clear_all_caches()


@pytest.fixture
def pagination_settings() -> PaginationSettings:
    """Pagination settings with the defaults spelled out."""
    return PaginationSettings(
        identity_field="_id",
        default_page_size=20,
        max_page_size=100,
    )


# ============================================================================
# Schema Fixtures
# ============================================================================


@pytest.fixture
def planet_schema() -> CollectionSchema:
    """Schema of the planet collection."""
    return CollectionSchema(
        {
            "name": FieldSpec(FieldType.STRING, unique=True, required=True),
            "order": FieldSpec(FieldType.NUMBER, unique=True, required=True),
            "has_rings": FieldSpec(FieldType.BOOLEAN, required=True),
            "category": FieldSpec(FieldType.STRING, required=True),
            "radius": FieldSpec(FieldType.NUMBER),
            "score": FieldSpec(FieldType.NUMBER),
            "discovered": FieldSpec(FieldType.DATE),
            "meta": FieldSpec(FieldType.DOCUMENT),
            "meta.moons": FieldSpec(FieldType.NUMBER),
            "tags": FieldSpec(FieldType.ARRAY),
            "notes": FieldSpec(FieldType.MIXED),
        }
    )


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def planets() -> list[dict[str, Any]]:
    """The eight planets as stored documents."""
    return planet_documents()


@pytest.fixture
def executor(planets: list[dict[str, Any]]) -> MemoryQueryExecutor:
    """In-memory executor seeded with the planets."""
    return MemoryQueryExecutor(planets)


@pytest.fixture
def paginator(
    executor: MemoryQueryExecutor,
    planet_schema: CollectionSchema,
    pagination_settings: PaginationSettings,
) -> KeysetPaginator:
    """Paginator over the planet collection."""
    return KeysetPaginator(executor, planet_schema, pagination_settings)


# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture
def reset_logging() -> Iterator[None]:
    """Stop the queue listener installed by a logging test and restore the root logger."""
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield
    shutdown()
    root.setLevel(level)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
