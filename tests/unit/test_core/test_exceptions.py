"""Unit tests for pagination exceptions."""

from __future__ import annotations

import pytest

from keyset_service.core.exceptions import (
    AppException,
    CursorDecodeError,
    CursorSchemaMismatchError,
    InputError,
    PaginationError,
    StoreError,
    UnknownFieldError,
)


@pytest.mark.unit
class TestAppException:
    """Tests for the RFC 7807 base exception."""

    def test_defaults(self):
        """Titles should default from the status code."""
        exc = AppException(status_code=404, detail="missing")

        assert str(exc) == "missing"
        assert exc.type == "about:blank"
        assert exc.title == "Not Found"
        assert exc.extra == {}

    def test_unknown_status_title(self):
        """Unlisted status codes should fall back to a generic title."""
        assert AppException(status_code=418, detail="teapot").title == "Error"


@pytest.mark.unit
class TestPaginationErrors:
    """Tests for the pagination error taxonomy."""

    @pytest.mark.parametrize(
        ("exc", "status_code", "type_", "title"),
        [
            (InputError("bad"), 400, "pagination-input-error", "Invalid Pagination Arguments"),
            (UnknownFieldError("mass"), 400, "unknown-field", "Unknown Field"),
            (CursorDecodeError(), 400, "cursor-decode-error", "Invalid Cursor"),
            (CursorSchemaMismatchError("bad"), 400, "cursor-schema-mismatch", "Cursor Does Not Match Schema"),
            (StoreError("down"), 503, "store-error", "Service Unavailable"),
        ],
    )
    def test_problem_fields(self, exc, status_code, type_, title):
        """Each error should carry its status, type and title."""
        assert isinstance(exc, PaginationError)
        assert isinstance(exc, AppException)
        assert exc.status_code == status_code
        assert exc.type == type_
        assert exc.title == title

    def test_unknown_field_detail(self):
        """UnknownFieldError should name the missing path."""
        exc = UnknownFieldError("meta.mass", extra={"collection": "planets"})

        assert exc.detail == "meta.mass doesn't exist in the schema"
        assert exc.path == "meta.mass"
        assert exc.extra == {"field": "meta.mass", "collection": "planets"}

    def test_cursor_decode_default_detail(self):
        """CursorDecodeError should have a generic default message."""
        assert CursorDecodeError().detail == "Unable to decode cursor"

    def test_store_error_chains_cause(self):
        """StoreError should keep the driver exception as its cause."""
        cause = ConnectionError("connection refused")

        with pytest.raises(StoreError) as exc_info:
            try:
                raise cause
            except ConnectionError as e:
                raise StoreError("count failed") from e

        assert exc_info.value.__cause__ is cause
