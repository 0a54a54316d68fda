"""Motor-backed query executor for keyset pagination.

Usage:
    from keyset_service.infra.database import MotorQueryExecutor, create_motor_client

    client = create_motor_client()
    collection = client[settings.database]["planets"]
    paginator = KeysetPaginator(MotorQueryExecutor(collection), schema)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from keyset_service.core.exceptions import StoreError

if TYPE_CHECKING:
    from keyset_service.core.pagination.sorting import SortSpec
    from keyset_service.core.settings import MongoSettings

logger = logging.getLogger(__name__)


def create_motor_client(settings: MongoSettings | None = None) -> AsyncIOMotorClient:
    """Create a Motor client from MongoDB settings.

    Args:
        settings: MongoDB settings. Defaults to the cached settings.

    Returns:
        A new ``AsyncIOMotorClient``. The caller owns and closes it.
    """
    if settings is None:
        from keyset_service.core.settings import get_mongo_settings

        settings = get_mongo_settings()

    logger.info(
        "Creating MongoDB client",
        extra={"database": settings.database, "tz_aware": settings.tz_aware},
    )
    return AsyncIOMotorClient(settings.uri.get_secret_value(), **settings.client_kwargs)


class MotorQueryExecutor:
    """``QueryExecutor`` over one Motor collection.

    Driver failures are raised as ``StoreError`` with the driver exception
    chained.

    Args:
        collection: Collection to query.
        identity_field: Field used by ``find_by_id``.
    """

    def __init__(self, collection: AsyncIOMotorCollection, *, identity_field: str = "_id") -> None:
        self.collection = collection
        self.identity_field = identity_field

    def _store_error(self, operation: str, error: PyMongoError) -> StoreError:
        return StoreError(
            f"MongoDB {operation} failed on '{self.collection.name}': {error}",
            extra={"operation": operation, "collection": self.collection.name},
        )

    async def count(self, filter: Mapping[str, Any]) -> int:
        try:
            return await self.collection.count_documents(dict(filter))
        except PyMongoError as e:
            raise self._store_error("count", e) from e

    async def find(
        self,
        filter: Mapping[str, Any],
        *,
        sort: SortSpec,
        projection: Mapping[str, Any] | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        cursor = self.collection.find(dict(filter), dict(projection) if projection else None)
        cursor = cursor.sort(list(sort))
        if skip:
            cursor = cursor.skip(skip)
        if limit is not None:
            cursor = cursor.limit(limit)
        try:
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            raise self._store_error("find", e) from e

    async def find_by_id(
        self,
        identity: Any,
        *,
        projection: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        try:
            return await self.collection.find_one(
                {self.identity_field: identity},
                dict(projection) if projection else None,
                **dict(options or {}),
            )
        except PyMongoError as e:
            raise self._store_error("find_by_id", e) from e


__all__ = ["MotorQueryExecutor", "create_motor_client"]
