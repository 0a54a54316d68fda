"""Shared API schemas."""

from keyset_service.core.schemas.problem_details import ProblemDetails

__all__ = ["ProblemDetails"]
