"""Custom exception classes for keyset pagination."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class.
    Follows RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.

    Example:
            raise AppException(
            status_code=400,
            detail="Cursor could not be decoded",
            type="cursor-decode-error",
            title="Bad Request",
            extra={"cursor": "abc"}
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for HTTP status code.

        Args:
            status_code: HTTP status code.

        Returns:
            Human-readable title for the status code.
        """
        titles = {
            400: "Bad Request",
            404: "Not Found",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
            503: "Service Unavailable",
        }
        return titles.get(status_code, "Error")


class PaginationError(AppException):
    """Base class for every error raised while building a page.

    All pagination errors are fatal to the current request. Nothing in
    the pagination core retries or downgrades them.
    """


class InputError(PaginationError):
    """Invalid pagination arguments.

    Raised when both or neither of ``first``/``last`` are set, when both
    ``after`` and ``before`` are set, or when a sort/select spec is malformed.

    Example:
            raise InputError(
            detail="Both first and last are set",
            extra={"first": 10, "last": 10}
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "pagination-input-error",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=400,
            detail=detail,
            type=type,
            title="Invalid Pagination Arguments",
            instance=instance,
            extra=extra,
        )


class UnknownFieldError(PaginationError):
    """A field path is missing from the collection schema.

    Attributes:
        path: The dotted field path that could not be resolved.
    """

    def __init__(
        self,
        path: str,
        type: str = "unknown-field",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.path = path
        super().__init__(
            status_code=400,
            detail=f"{path} doesn't exist in the schema",
            type=type,
            title="Unknown Field",
            instance=instance,
            extra={"field": path, **(extra or {})},
        )


class CursorDecodeError(PaginationError):
    """The cursor token is not a decodable cursor.

    Raised for invalid base64, invalid extended JSON, or a payload that is
    not a field mapping.
    """

    def __init__(
        self,
        detail: str = "Unable to decode cursor",
        type: str = "cursor-decode-error",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=400,
            detail=detail,
            type=type,
            title="Invalid Cursor",
            instance=instance,
            extra=extra,
        )


class CursorSchemaMismatchError(PaginationError):
    """The cursor decodes but does not fit the collection schema.

    Example:
            raise CursorSchemaMismatchError(
            detail="Cursor value for 'age' is not a number",
            extra={"field": "age"}
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "cursor-schema-mismatch",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=400,
            detail=detail,
            type=type,
            title="Cursor Does Not Match Schema",
            instance=instance,
            extra=extra,
        )


class StoreError(PaginationError):
    """The backing store failed while serving a pagination query.

    The original driver exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        detail: str,
        type: str = "store-error",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=503,
            detail=detail,
            type=type,
            title="Service Unavailable",
            instance=instance,
            extra=extra,
        )


__all__ = [
    "AppException",
    "CursorDecodeError",
    "CursorSchemaMismatchError",
    "InputError",
    "PaginationError",
    "StoreError",
    "UnknownFieldError",
]
