"""Unit tests for the cursor pagination FastAPI dependency."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from keyset_service.app import configure_exception_handlers
from keyset_service.core.dependencies import CursorPagination, CursorPaginationParams, get_cursor_pagination
from keyset_service.core.exceptions import InputError


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    configure_exception_handlers(app)

    @app.get("/params")
    async def read_params(pagination: CursorPagination) -> dict:
        return pagination.to_kwargs()

    return app


@pytest.fixture
async def client(app: FastAPI):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.mark.unit
class TestGetCursorPagination:
    """Tests for get_cursor_pagination called directly."""

    def test_defaults_first(self):
        """No size should default first to the configured page size."""
        params = get_cursor_pagination()

        assert params == CursorPaginationParams(first=20)

    def test_caps_to_max(self):
        """Sizes above the maximum should be capped."""
        assert get_cursor_pagination(first=500).first == 100
        assert get_cursor_pagination(last=500).last == 100

    def test_uses_env_settings(self, monkeypatch: pytest.MonkeyPatch):
        """Page size settings should come from the environment."""
        monkeypatch.setenv("PAGINATION_DEFAULT_PAGE_SIZE", "7")
        monkeypatch.setenv("PAGINATION_MAX_PAGE_SIZE", "9")

        assert get_cursor_pagination().first == 7
        assert get_cursor_pagination(last=50).last == 9

    def test_rejects_both_sizes(self):
        """first and last together should be rejected."""
        with pytest.raises(InputError, match="Both first and last are set"):
            get_cursor_pagination(first=1, last=1)

    def test_rejects_both_cursors(self):
        """after and before together should be rejected."""
        with pytest.raises(InputError, match="Both after and before are set"):
            get_cursor_pagination(first=1, after="a", before="b")

    def test_to_kwargs_drops_unset(self):
        """to_kwargs should only include supplied arguments."""
        assert CursorPaginationParams(last=5, before="abc").to_kwargs() == {"last": 5, "before": "abc"}


@pytest.mark.unit
class TestCursorPaginationRoute:
    """Tests for the dependency inside a route."""

    async def test_query_parameters(self, client):
        """Query parameters should be forwarded."""
        response = await client.get("/params", params={"last": 3, "before": "tok"})

        assert response.status_code == 200
        assert response.json() == {"last": 3, "before": "tok"}

    async def test_default_size(self, client):
        """An empty query should default to the configured first."""
        response = await client.get("/params")

        assert response.json() == {"first": 20}

    async def test_conflict_is_problem_details(self, client):
        """Conflicting arguments should render as problem details."""
        response = await client.get("/params", params={"first": 1, "last": 1})

        assert response.status_code == 400
        assert response.headers["content-type"] == "application/problem+json"
        body = response.json()
        assert body["type"] == "pagination-input-error"
        assert body["first"] == 1

    async def test_non_positive_size_is_validation_error(self, client):
        """first=0 should fail query validation."""
        response = await client.get("/params", params={"first": 0})

        assert response.status_code == 422
        assert response.json()["type"] == "validation-error"
