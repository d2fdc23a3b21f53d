"""
Resize options and target-size helpers.
"""

import math
import operator
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import InvalidArgumentError

AXIS_ORDERS = ('alternate', 'alternate-horizontal', 'vertical-first', 'horizontal-first')


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _as_count(name, value) -> int:
    """Integer >= 0, accepting numpy and torch integer scalars but not bools or floats."""
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be an integer >= 0, got {value!r}")
    try:
        value = operator.index(value)
    except TypeError:
        raise InvalidArgumentError(f"{name} must be an integer >= 0, got {value!r}") from None
    if value < 0:
        raise InvalidArgumentError(f"{name} must be an integer >= 0, got {value!r}")
    return value


@dataclass
class ResizeConfig:
    """
    Options for one resize run.

    Attributes:
        target_width: Final width in pixels
        target_height: Final height in pixels
        snapshot_interval: Seams between snapshot callbacks (0 disables)
        axis_order: How vertical and horizontal removals are interleaved,
            one of AXIS_ORDERS
        incremental_energy: Update the energy map in a band around each
            removed seam instead of recomputing it (same results)
    """

    target_width: int
    target_height: int
    snapshot_interval: int = 1
    axis_order: str = 'alternate'
    incremental_energy: bool = False

    def validate(self) -> 'ResizeConfig':
        """
        Check the options and normalize integer-like sizes to int.

        A target of 0 is allowed on one axis (that axis is carved last),
        never on both.
        """
        for name in ('target_width', 'target_height', 'snapshot_interval'):
            setattr(self, name, _as_count(name, getattr(self, name)))
        if self.target_width == 0 and self.target_height == 0:
            raise InvalidArgumentError("target_width and target_height cannot both be 0")
        if self.axis_order not in AXIS_ORDERS:
            raise InvalidArgumentError(
                f"Invalid axis_order: {self.axis_order!r}. Must be one of {AXIS_ORDERS}")
        return self


def target_from_scale(width: int, height: int, percent: float) -> Tuple[int, int]:
    """
    Target size for a percentage of the original dimensions.

    Each side is rounded half up and never drops below one pixel.
    """
    if percent <= 0 or percent > 100:
        raise InvalidArgumentError(f"Scale must be in (0, 100], got {percent}")
    return (max(1, _round_half_up(percent / 100 * width)),
            max(1, _round_half_up(percent / 100 * height)))


def target_with_aspect(width: int, height: int,
                       target_width: Optional[int] = None,
                       target_height: Optional[int] = None) -> Tuple[int, int]:
    """
    Fill in the missing target dimension so the aspect ratio is kept.

    When both are given they are returned unchanged; when neither is given
    the original size is returned. Derived values are clamped to
    [1, original].
    """
    if target_width is not None and target_height is not None:
        return target_width, target_height
    if target_width is not None:
        derived = _round_half_up(target_width / width * height)
        return target_width, min(height, max(1, derived))
    if target_height is not None:
        derived = _round_half_up(target_height / height * width)
        return min(width, max(1, derived)), target_height
    return width, height


def frame_interval(total_seams: int, max_frames: int) -> int:
    """Snapshot cadence that keeps a run under max_frames snapshots."""
    if max_frames < 1:
        raise InvalidArgumentError(f"max_frames must be >= 1, got {max_frames}")
    return max(1, math.ceil(total_seams / max_frames))
