"""
Exception hierarchy for seam carving.

Everything raised on purpose by this package derives from SeamCarvingError,
so callers can catch the whole family in one place.
"""


class SeamCarvingError(Exception):
    """Base class for all seam carving errors."""


class InvalidStateError(SeamCarvingError):
    """Operation invoked on an absent or empty grid, or on a finished run."""


class InvalidArgumentError(SeamCarvingError, ValueError):
    """Malformed direction, index, policy or target passed in."""


class InvalidDimensionError(SeamCarvingError):
    """An energy or cumulative matrix has a zero dimension."""


class InvalidSeamError(SeamCarvingError):
    """A seam's length or indices don't match the grid it's applied to."""


class UnsupportedDirectionError(SeamCarvingError):
    """A requested resize would grow a dimension."""


class SnapshotIOError(SeamCarvingError):
    """A progress snapshot could not be exported. Never aborts a resize."""


class ImageReadError(SeamCarvingError):
    """An image file could not be decoded into a PixelGrid."""


class ImageWriteError(SeamCarvingError):
    """A PixelGrid could not be encoded to a file."""
