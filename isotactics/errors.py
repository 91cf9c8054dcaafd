from __future__ import annotations


class IsoTacticsError(Exception):
    """Base class for errors raised by the spatial core."""


class ConfigurationError(IsoTacticsError):
    """Invalid construction parameters (e.g. a non-positive tile size)."""


class InvariantViolation(IsoTacticsError):
    """A programmer error that would break a Tile Store or unit invariant."""


class InvalidPosition(IsoTacticsError, ValueError):
    """A position that is not finite or not aligned to the grid."""
