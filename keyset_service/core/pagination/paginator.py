"""Keyset pagination over a document collection.

The paginator turns ``filter + sort + first/last + after/before`` into one
page of documents without offset drift. For a cursor it computes where the
cursor row sits in the filtered, sorted set:

* rows strictly before the cursor's leading value are counted in the store;
* rows sharing that value (the tie group) are fetched with only the sort
  fields, and the cursor is located among them by binary search.

The sum is an exact skip offset inside a window bounded by the leading sort
field. Results are always read in the ascending order of the sort spec;
backward pages come from moving the skip/limit window, never from reversing
the list.

Example:
    paginator = KeysetPaginator(MotorQueryExecutor(collection), schema)

    page = await paginator.paginate({"status": "active"}, sort="-score", first=20)
    next_page = await paginator.paginate(
        {"status": "active"},
        sort="-score",
        first=20,
        after=page.page_info.end_cursor,
    )
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import IntEnum
from typing import TYPE_CHECKING, Any

from keyset_service.core.exceptions import InputError
from keyset_service.core.pagination.conditions import (
    Boundary,
    and_conditions,
    build_boundary,
    build_strict_condition,
    ensure_orderable,
)
from keyset_service.core.pagination.cursor import CursorCodec
from keyset_service.core.pagination.index_finder import find_index
from keyset_service.core.pagination.ranking import ABSENT
from keyset_service.core.pagination.schemas import Document, Edge, Page, PageInfo
from keyset_service.core.pagination.sorting import (
    get_value_by_path,
    normalize_select,
    normalize_sort,
    to_projection,
)
from keyset_service.core.pagination.validation import validate_cursor
from keyset_service.core.settings import get_pagination_settings
from keyset_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from keyset_service.core.database.protocols import QueryExecutor, SchemaProvider
    from keyset_service.core.pagination.cursor import Cursor, CursorTransform
    from keyset_service.core.pagination.sorting import SelectInput, SortInput, SortSpec
    from keyset_service.core.settings import PaginationSettings

type Filter = Mapping[str, Any]


def row_projection(sort: SortSpec) -> dict[str, int]:
    """Project a row to its sort fields only.

    MongoDB returns ``_id`` with every inclusion projection unless it is
    excluded, and a cursor must hold nothing but sort fields.
    """
    projection = to_projection(sort) or {}
    if all(field.split(".", 1)[0] != "_id" for field, _ in sort):
        projection["_id"] = 0
    return projection


class Direction(IntEnum):
    """Traversal direction of a page request."""

    FORWARD = 1
    BACKWARD = -1


def get_limit_and_direction(first: int | None = None, last: int | None = None) -> tuple[Direction, int]:
    """Resolve ``first``/``last`` into a direction and a limit.

    Exactly one of ``first`` and ``last`` must be given, and it must be at
    least 1.

    Raises:
        InputError: If neither or both are set, or the size is not positive.
    """
    if first is None and last is None:
        raise InputError("Neither first nor last is set. Unable to find direction.")
    if first is not None and last is not None:
        raise InputError(
            "Both first and last are set. Unable to find direction.",
            extra={"first": first, "last": last},
        )
    if first is not None:
        if first < 1:
            raise InputError("first must be a positive integer", extra={"first": first})
        return Direction.FORWARD, first
    if last < 1:  # type: ignore[operator]
        raise InputError("last must be a positive integer", extra={"last": last})
    return Direction.BACKWARD, last  # type: ignore[return-value]


class KeysetPaginator:
    """Cursor paginator bound to one collection.

    Args:
        executor: Query executor for the collection.
        schema: Field metadata for the collection.
        settings: Pagination settings. Defaults to the cached settings.
        codec: Default cursor codec. Per-call encoder/decoder override it.
    """

    def __init__(
        self,
        executor: QueryExecutor,
        schema: SchemaProvider,
        settings: PaginationSettings | None = None,
        *,
        codec: CursorCodec | None = None,
    ) -> None:
        self.executor = executor
        self.schema = schema
        self.settings = settings or get_pagination_settings()
        self.codec = codec or CursorCodec(tz_aware=self.settings.cursor_tz_aware)
        self._logger = logging.getLogger(__name__)
        self._lazy = get_lazy_logger(__name__)

    @property
    def identity_field(self) -> str:
        return self.settings.identity_field

    # ──────────────────────────────────────────────────────────────
    # Sort and cursor resolution
    # ──────────────────────────────────────────────────────────────

    def resolve_sort(self, sort: SortInput) -> SortSpec:
        """Normalize a sort description and check every field against the schema.

        Raises:
            InputError: If the sort is malformed or its leading field is not orderable.
            UnknownFieldError: If a sort field is not in the schema.
        """
        spec = normalize_sort(sort, self.identity_field)
        for field, _ in spec:
            self.schema.field_type(field)
        leading = spec[0][0]
        ensure_orderable(leading, self.schema.field_type(leading))
        return spec

    def codec_for(
        self,
        encoder: CursorTransform | None = None,
        decoder: CursorTransform | None = None,
    ) -> CursorCodec:
        """Return the codec for one request, honouring per-call transforms."""
        if encoder is None and decoder is None:
            return self.codec
        return CursorCodec(
            encoder or self.codec.encoder,
            decoder or self.codec.decoder,
            tz_aware=self.settings.cursor_tz_aware,
        )

    async def decode_cursor(
        self,
        token: str | Cursor,
        sort: SortSpec,
        codec: CursorCodec | None = None,
    ) -> Cursor:
        """Decode (if needed) and validate a cursor for ``sort``.

        Raises:
            CursorDecodeError: If the token cannot be decoded.
            CursorSchemaMismatchError: If the cursor does not fit the schema.
        """
        if isinstance(token, Mapping):
            cursor: Cursor = token
        else:
            cursor = await (codec or self.codec).decode(token)
        validate_cursor(cursor, self.schema, sort, self.identity_field)
        return cursor

    # ──────────────────────────────────────────────────────────────
    # Offset computation
    # ──────────────────────────────────────────────────────────────

    def _leading(self, cursor: Cursor, sort: SortSpec) -> tuple[str, int, Any]:
        field, order = sort[0]
        return field, order, get_value_by_path(cursor, field)

    def _nullable(self, field: str) -> bool:
        return field != self.identity_field and not self.schema.is_required(field)

    def _boundary(self, direction: Direction, cursor: Cursor, sort: SortSpec, skip_cursor: bool) -> Boundary:
        field, order, value = self._leading(cursor, sort)
        return build_boundary(
            field,
            order,
            value,
            field_type=self.schema.field_type(field),
            unique=field == self.identity_field or self.schema.is_unique(field),
            skip_cursor=skip_cursor,
            direction=direction,
            nullable=self._nullable(field),
        )

    async def _count_before(self, cursor: Cursor, filter: Filter, sort: SortSpec) -> int:
        """Count rows whose leading value sorts strictly before the cursor's."""
        field, order, value = self._leading(cursor, sort)
        condition = build_strict_condition(
            field,
            order,
            value,
            field_type=self.schema.field_type(field),
            direction=Direction.BACKWARD,
            nullable=self._nullable(field),
        )
        if condition is None:
            return 0
        return await self.executor.count(and_conditions(filter, condition))

    async def _tie_offset(
        self,
        direction: Direction,
        cursor: Cursor,
        filter: Filter,
        sort: SortSpec,
        skip_cursor: bool,
    ) -> int:
        """Locate the cursor inside the rows sharing its leading value."""
        field, _, value = self._leading(cursor, sort)
        tie_filter = and_conditions(filter, {field: None if value is ABSENT else value})
        rows = await self.executor.find(tie_filter, sort=sort, projection=row_projection(sort))
        index = find_index(direction, cursor, rows, sort, skip_cursor)
        self._lazy.debug(
            lambda: f"Cursor located at {index} of {len(rows)} tied rows",
            extra={"field": field, "direction": int(direction)},
        )
        return index

    # ──────────────────────────────────────────────────────────────
    # Windowed fetch
    # ──────────────────────────────────────────────────────────────

    async def forward(
        self,
        cursor: Cursor | None,
        filter: Filter,
        sort: SortSpec,
        limit: int,
        *,
        skip_cursor: bool,
        projection: SelectInput = None,
        options: Mapping[str, Any] | None = None,
        codec: CursorCodec | None = None,
    ) -> list[Edge[Document]]:
        """Fetch up to ``limit`` edges after the cursor, in sort order."""
        if limit <= 0:
            return []

        skip = 0
        boundary = Boundary(None)
        if cursor is not None:
            boundary = self._boundary(Direction.FORWARD, cursor, sort, skip_cursor)
            if not boundary.strict:
                skip = await self._tie_offset(Direction.FORWARD, cursor, filter, sort, skip_cursor)
                if boundary.condition is None:
                    skip += await self._count_before(cursor, filter, sort)

        return await self._fetch(filter, boundary, sort, skip, limit, projection, options, codec)

    async def backward(
        self,
        cursor: Cursor | None,
        filter: Filter,
        sort: SortSpec,
        limit: int,
        *,
        skip_cursor: bool,
        total: int,
        projection: SelectInput = None,
        options: Mapping[str, Any] | None = None,
        codec: CursorCodec | None = None,
    ) -> list[Edge[Document]]:
        """Fetch up to ``limit`` edges before the cursor, in sort order.

        ``total`` is the number of rows matching ``filter``; it places the
        window when there is no cursor.
        """
        boundary = Boundary(None)
        if cursor is None:
            rank = total
        else:
            boundary = self._boundary(Direction.BACKWARD, cursor, sort, skip_cursor)
            rank = await self._count_before(cursor, filter, sort)
            if not boundary.strict:
                rank += await self._tie_offset(Direction.BACKWARD, cursor, filter, sort, skip_cursor)

        skip = rank - limit
        if skip < 0:
            skip, limit = 0, rank

        if limit <= 0:
            return []

        return await self._fetch(filter, boundary, sort, skip, limit, projection, options, codec)

    async def _fetch(
        self,
        filter: Filter,
        boundary: Boundary,
        sort: SortSpec,
        skip: int,
        limit: int,
        projection: SelectInput,
        options: Mapping[str, Any] | None,
        codec: CursorCodec | None,
    ) -> list[Edge[Document]]:
        self._lazy.debug(
            "Fetching window",
            extra={"skip": skip, "limit": limit, "bounded": boundary.condition is not None},
        )
        rows = await self.executor.find(
            and_conditions(filter, boundary.condition),
            sort=sort,
            projection=row_projection(sort),
            skip=skip,
            limit=limit,
        )
        return await self._build_edges(rows, projection, options, codec or self.codec)

    async def _build_edges(
        self,
        rows: Any,
        projection: SelectInput,
        options: Mapping[str, Any] | None,
        codec: CursorCodec,
    ) -> list[Edge[Document]]:
        """Re-fetch each row's document and encode the row as its cursor.

        Rows deleted between the window query and the re-fetch are dropped.
        """
        node_projection = to_projection(normalize_select(projection))
        edges: list[Edge[Document]] = []
        for row in rows:
            node = await self.executor.find_by_id(
                row[self.identity_field],
                projection=node_projection,
                options=options,
            )
            if node is None:
                continue
            edges.append(Edge[Document](node=dict(node), cursor=await codec.encode(row)))
        return edges

    async def get_edges(
        self,
        *,
        cursor: Cursor | None,
        filter: Filter,
        sort: SortInput = None,
        first: int | None = None,
        last: int | None = None,
        skip_cursor: bool,
        total: int,
        projection: SelectInput = None,
        options: Mapping[str, Any] | None = None,
        codec: CursorCodec | None = None,
    ) -> list[Edge[Document]]:
        """Normalize the sort and dispatch to ``forward`` or ``backward``."""
        spec = normalize_sort(sort, self.identity_field)
        direction, limit = get_limit_and_direction(first, last)

        if direction is Direction.FORWARD:
            return await self.forward(
                cursor,
                filter,
                spec,
                limit,
                skip_cursor=skip_cursor,
                projection=projection,
                options=options,
                codec=codec,
            )
        return await self.backward(
            cursor,
            filter,
            spec,
            limit,
            skip_cursor=skip_cursor,
            total=total,
            projection=projection,
            options=options,
            codec=codec,
        )

    # ──────────────────────────────────────────────────────────────
    # Request handling
    # ──────────────────────────────────────────────────────────────

    async def paginate(
        self,
        filter: Filter | None = None,
        *,
        sort: SortInput = None,
        first: int | None = None,
        last: int | None = None,
        after: str | Cursor | None = None,
        before: str | Cursor | None = None,
        projection: SelectInput = None,
        options: Mapping[str, Any] | None = None,
        encoder: CursorTransform | None = None,
        decoder: CursorTransform | None = None,
        access_filter: Filter | None = None,
    ) -> Page[Document]:
        """Return one page of documents.

        Args:
            filter: Store filter selecting the rows to paginate.
            sort: Sort description (see ``normalize_sort``).
            first: Page size when paginating forward.
            last: Page size when paginating backward.
            after: Cursor token (or decoded cursor) to start from.
            before: Cursor token (or decoded cursor) to start from.
            projection: Projection applied to each returned node.
            options: Extra options passed to each node re-fetch.
            encoder: Per-call cursor transport encoder.
            decoder: Per-call cursor transport decoder.
            access_filter: Filter ANDed into every query, e.g. row-level access rules.

        Returns:
            The page, with ``total_count`` covering every matching row.

        Raises:
            InputError: If first/last or after/before are inconsistent.
            UnknownFieldError: If a sort field is not in the schema.
            CursorDecodeError: If the cursor token is malformed.
            CursorSchemaMismatchError: If the cursor does not fit the schema.
            StoreError: If the store fails.

        The cursor is read in the direction of ``first``/``last``: ``first``
        returns rows after the cursor and ``last`` rows before it, whichever of
        ``after``/``before`` carries it.
        """
        direction, requested = get_limit_and_direction(first, last)
        if after is not None and before is not None:
            raise InputError("Both after and before are set. Only one cursor may be given.")

        spec = self.resolve_sort(sort)
        codec = self.codec_for(encoder, decoder)

        token = after if after is not None else before
        cursor = await self.decode_cursor(token, spec, codec) if token is not None else None

        scoped = and_conditions(filter, access_filter)
        total = await self.executor.count(scoped)
        if total == 0:
            return Page[Document](total_count=0)

        edges = await self.get_edges(
            cursor=cursor,
            filter=scoped,
            sort=spec,
            first=requested + 1 if direction is Direction.FORWARD else None,
            last=requested + 1 if direction is Direction.BACKWARD else None,
            skip_cursor=True,
            total=total,
            projection=projection,
            options=options,
            codec=codec,
        )

        opposite_exists = False
        if cursor is not None:
            beyond = await self.get_edges(
                cursor=cursor,
                filter=scoped,
                sort=spec,
                first=1 if direction is Direction.BACKWARD else None,
                last=1 if direction is Direction.FORWARD else None,
                skip_cursor=False,
                total=total,
                projection={self.identity_field: 1},
                options=options,
                codec=codec,
            )
            opposite_exists = bool(beyond)

        has_previous_page = has_next_page = False
        if direction is Direction.FORWARD:
            has_next_page = len(edges) > requested
            edges = edges[:requested]
            has_previous_page = opposite_exists
        else:
            has_previous_page = len(edges) > requested
            edges = edges[-requested:]
            has_next_page = opposite_exists

        page = Page[Document](
            total_count=total,
            edges=edges,
            page_info=PageInfo(
                start_cursor=edges[0].cursor if edges else None,
                end_cursor=edges[-1].cursor if edges else None,
                has_previous_page=has_previous_page,
                has_next_page=has_next_page,
            ),
        )
        self._logger.debug(
            "Page assembled",
            extra={
                "total_count": total,
                "edges": len(edges),
                "has_previous_page": has_previous_page,
                "has_next_page": has_next_page,
            },
        )
        return page


async def paginate(
    executor: QueryExecutor,
    schema: SchemaProvider,
    filter: Filter | None = None,
    *,
    settings: PaginationSettings | None = None,
    **kwargs: Any,
) -> Page[Document]:
    """Paginate one request without keeping a ``KeysetPaginator`` around.

    Keyword arguments are those of ``KeysetPaginator.paginate``.
    """
    return await KeysetPaginator(executor, schema, settings).paginate(filter, **kwargs)


__all__ = ["Direction", "KeysetPaginator", "get_limit_and_direction", "paginate", "row_projection"]
