"""Exception taxonomy for region loading and rendering."""

from __future__ import annotations


class GeoBrowserError(Exception):
    """Base class for all geobrowser domain errors."""


class NotFoundError(GeoBrowserError, LookupError):
    """Raised when a region key has no backing data file or entry."""

    def __init__(self, key: str, message: str | None = None) -> None:
        self.key = key
        super().__init__(message or f"No data found for region '{key}'")


class MalformedInputError(GeoBrowserError, ValueError):
    """Raised when region data exists but is structurally invalid."""


class EmptyGeometryError(GeoBrowserError, ValueError):
    """Raised when bounds or projection are requested for zero polygons."""


class LoadFailure(GeoBrowserError):
    """Raised by navigation when a transition cannot load its target.

    The underlying ``NotFoundError`` or ``MalformedInputError`` is chained as
    ``__cause__``.
    """

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        self.message = message
        super().__init__(message)
