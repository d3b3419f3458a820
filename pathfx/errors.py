"""Errors raised by the geometry engine.

Degenerate inputs that simply mean "nothing to draw" (zero-length
sub-paths, all-zero dash intervals) are not errors and never raise.
"""


class PathFxError(Exception):
    """Base class for engine errors. Renderers skip the frame on any of these."""


class EmptyPathError(PathFxError):
    """A path with no segments was given where one is required."""


class InvalidParameterError(PathFxError):
    """An effect parameter is out of range (e.g. non-positive advance)."""


class IncompatibleChainError(PathFxError):
    """A stamp effect was used where a path-producing effect is required."""
