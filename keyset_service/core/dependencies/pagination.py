"""Cursor pagination dependency for FastAPI routes.

Reads the Relay-style ``first``/``last``/``after``/``before`` query
parameters, applies the configured default and maximum page sizes, and
rejects conflicting combinations before any query runs.

Usage:
    from keyset_service.core.dependencies.pagination import CursorPagination

    @router.get("/planets", response_model=Page[Document])
    async def list_planets(pagination: CursorPagination) -> Page[Document]:
        return await paginator.paginate({}, sort="name", **pagination.to_kwargs())
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, Query
from pydantic import BaseModel, Field

from keyset_service.core.exceptions import InputError
from keyset_service.core.settings import get_pagination_settings


class CursorPaginationParams(BaseModel):
    """Validated cursor pagination parameters.

    Attributes:
        first: Page size when paginating forward.
        last: Page size when paginating backward.
        after: Cursor token to start after.
        before: Cursor token to start before.
    """

    first: int | None = Field(default=None, ge=1, description="Items to return going forward")
    last: int | None = Field(default=None, ge=1, description="Items to return going backward")
    after: str | None = Field(default=None, description="Cursor to start after")
    before: str | None = Field(default=None, description="Cursor to start before")

    model_config = {"frozen": True}

    def to_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``KeysetPaginator.paginate``."""
        return self.model_dump(exclude_none=True)


def get_cursor_pagination(
    first: Annotated[
        int | None,
        Query(ge=1, description="Number of items to return after the cursor"),
    ] = None,
    last: Annotated[
        int | None,
        Query(ge=1, description="Number of items to return before the cursor"),
    ] = None,
    after: Annotated[
        str | None,
        Query(min_length=1, description="Opaque cursor to paginate from"),
    ] = None,
    before: Annotated[
        str | None,
        Query(min_length=1, description="Opaque cursor to paginate from"),
    ] = None,
) -> CursorPaginationParams:
    """Get cursor pagination parameters.

    Defaults ``first`` to the configured page size when neither ``first``
    nor ``last`` is given, and caps both at the configured maximum.

    Raises:
        InputError: If both ``first`` and ``last``, or both ``after`` and
            ``before``, are given.
    """
    settings = get_pagination_settings()

    if first is not None and last is not None:
        raise InputError(
            "Both first and last are set. Unable to find direction.",
            extra={"first": first, "last": last},
        )
    if after is not None and before is not None:
        raise InputError("Both after and before are set. Only one cursor may be given.")

    if first is None and last is None:
        first = settings.default_page_size
    if first is not None:
        first = min(first, settings.max_page_size)
    if last is not None:
        last = min(last, settings.max_page_size)

    return CursorPaginationParams(first=first, last=last, after=after, before=before)


CursorPagination = Annotated[CursorPaginationParams, Depends(get_cursor_pagination)]


__all__ = [
    "CursorPagination",
    "CursorPaginationParams",
    "get_cursor_pagination",
]
