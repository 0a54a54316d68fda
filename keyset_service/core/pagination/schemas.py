"""Pagination response schemas (GraphQL Relay connection pattern).

Pages follow the Relay connection shape and serialize with camelCase keys:

    {
        "totalCount": 42,
        "edges": [{"node": {...}, "cursor": "eyJfaWQiOi..."}],
        "pageInfo": {
            "startCursor": "eyJfaWQiOi...",
            "endCursor": "eyJfaWQiOi...",
            "hasPreviousPage": false,
            "hasNextPage": true
        }
    }
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Generic, TypeVar

from bson import json_util
from bson.json_util import RELAXED_JSON_OPTIONS
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def document_to_json(document: dict[str, Any]) -> dict[str, Any]:
    """Convert a store document to JSON-safe relaxed extended JSON."""
    return json.loads(json_util.dumps(document, json_options=RELAXED_JSON_OPTIONS))


Document = Annotated[dict[str, Any], PlainSerializer(document_to_json, when_used="json")]
"""A store document; BSON values are rendered as extended JSON in JSON output."""


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PageInfo(_CamelModel):
    """Pagination metadata following GraphQL Relay specification.

    Attributes:
        start_cursor: Cursor of the first edge in this page
        end_cursor: Cursor of the last edge in this page
        has_previous_page: Whether rows exist before the first edge
        has_next_page: Whether rows exist after the last edge
    """

    start_cursor: str | None = Field(
        default=None,
        description="Cursor of the first item",
    )
    end_cursor: str | None = Field(
        default=None,
        description="Cursor of the last item",
    )
    has_previous_page: bool = Field(
        default=False,
        description="Whether previous items exist",
    )
    has_next_page: bool = Field(
        default=False,
        description="Whether more items exist",
    )


class Edge(_CamelModel, Generic[T]):
    """Edge wrapper for paginated items (Relay pattern).

    Attributes:
        node: The re-fetched document
        cursor: Encoded position of the row's sort-field projection
    """

    node: T = Field(description="The data item")
    cursor: str = Field(description="Cursor for this item")


class Page(_CamelModel, Generic[T]):
    """One page of a keyset-paginated query.

    ``total_count`` counts every row matching the filter, not the edges.

    Example:
        page = await paginator.paginate(filter={"status": "active"}, first=10)
        for edge in page.edges:
            print(edge.node["name"], edge.cursor)
        if page.page_info.has_next_page:
            await paginator.paginate(..., first=10, after=page.page_info.end_cursor)
    """

    total_count: int = Field(ge=0, description="Rows matching the filter")
    edges: list[Edge[T]] = Field(default_factory=list, description="Edges in sort order")
    page_info: PageInfo = Field(default_factory=PageInfo, description="Navigation metadata")

    @property
    def nodes(self) -> list[T]:
        """Documents of this page in order."""
        return [edge.node for edge in self.edges]


__all__ = ["Document", "Edge", "Page", "PageInfo", "document_to_json"]
