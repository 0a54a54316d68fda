"""FastAPI integration for keyset pagination."""

from keyset_service.app.exception_handlers import configure_exception_handlers

__all__ = ["configure_exception_handlers"]
