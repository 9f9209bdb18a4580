"""Exception hierarchy for the polelabel package."""

from __future__ import annotations


class PolelabelError(Exception):
    """Base class for every error raised by polelabel."""


class InvalidInputError(PolelabelError, ValueError):
    """Raised when a polygon, coordinate or search parameter is unusable.

    Detected before any search work begins; no partial result is produced.
    """


class ConfigError(PolelabelError, ValueError):
    """Raised when runtime settings cannot be resolved."""
