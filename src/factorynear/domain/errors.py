"""
Error taxonomy.

Nothing here is fatal: location errors are turned into a fallback coordinate by
the resolver, dataset failures leave the dataset unavailable, and manual-input
parse failures are ignored by the caller.
"""

from __future__ import annotations

from typing import Literal

LocationErrorKind = Literal["unsupported", "permission_denied", "position_unavailable", "timeout", "unknown"]


class LocationError(Exception):
    """Base class for typed failures of a device location source."""

    kind: LocationErrorKind = "unknown"


class LocationUnsupported(LocationError):
    kind = "unsupported"


class LocationPermissionDenied(LocationError):
    kind = "permission_denied"


class LocationUnavailable(LocationError):
    kind = "position_unavailable"


class LocationTimeout(LocationError):
    kind = "timeout"


class LocationUnknownError(LocationError):
    kind = "unknown"


class DatasetFetchFailure(Exception):
    """The facility dataset could not be read, fetched or decoded."""


class ManualInputParseFailure(ValueError):
    """Manual latitude/longitude text did not parse as two finite floats."""
