"""Exceptions raised by API relationships."""

from __future__ import annotations


class ApiRelationError(RuntimeError):
    """Base exception for API relationship failures."""


class MissingFetchFunctionError(ApiRelationError):
    """Raised when a fetch is required but the relation has no fetch function."""
