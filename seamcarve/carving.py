"""
High-level carving functions that drive the energy -> seam -> removal loop.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

import torch

from .config import ResizeConfig
from .energy import compute_energy, update_energy
from .errors import InvalidStateError, SnapshotIOError, UnsupportedDirectionError
from .grid import PixelGrid, check_direction, require_grid
from .seam import dp_seam, remove_seam

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[PixelGrid], None]


@dataclass
class CarveStep:
    """Record of one seam removal."""

    direction: str
    seam: torch.Tensor
    seams_removed: int
    total_seams: int
    width: int
    height: int
    elapsed: float = 0.0

    @property
    def progress(self) -> float:
        return self.seams_removed / self.total_seams if self.total_seams else 1.0

    @property
    def eta(self) -> float:
        """Seconds left, extrapolated from the average time per seam so far."""
        if self.seams_removed == 0:
            return 0.0
        return self.elapsed / self.seams_removed * (self.total_seams - self.seams_removed)


class Carver:
    """
    Seam-by-seam resize run.

    Owns the current grid and replaces it after every removal. Iterating a
    Carver yields one CarveStep per removed seam; stop iterating to cancel.
    resize() is the one-shot wrapper.

    Args:
        grid: Input image
        target_width: Final width (<= grid width)
        target_height: Final height (<= grid height)
        on_snapshot: Called with the current grid every snapshot_interval seams
        snapshot_interval: Seams between snapshots, 0 disables them
        axis_order: 'alternate', 'alternate-horizontal', 'vertical-first'
            or 'horizontal-first'
        incremental_energy: Band-update the energy map between seams
    """

    def __init__(self, grid: PixelGrid, target_width: int, target_height: int,
                 on_snapshot: Optional[SnapshotCallback] = None,
                 snapshot_interval: int = 1,
                 axis_order: str = 'alternate',
                 incremental_energy: bool = False):
        grid = require_grid(grid)
        self.config = ResizeConfig(target_width, target_height, snapshot_interval,
                                   axis_order, incremental_energy).validate()
        target_width, target_height = self.config.target_width, self.config.target_height

        if target_width > grid.width or target_height > grid.height:
            raise UnsupportedDirectionError(
                f"Cannot grow {grid.width}x{grid.height} to "
                f"{target_width}x{target_height}: only shrinking is supported")

        self.grid = grid
        self.on_snapshot = on_snapshot
        self.vertical_left = grid.width - target_width
        self.horizontal_left = grid.height - target_height
        self.total_seams = self.vertical_left + self.horizontal_left
        self.seams_removed = 0
        self.snapshot_errors: List[SnapshotIOError] = []

        self._energy: Optional[torch.Tensor] = None
        self._last_direction: Optional[str] = None
        self._started: Optional[float] = None

    @classmethod
    def from_config(cls, grid: PixelGrid, config: ResizeConfig,
                    on_snapshot: Optional[SnapshotCallback] = None) -> 'Carver':
        return cls(grid, config.target_width, config.target_height,
                   on_snapshot=on_snapshot,
                   snapshot_interval=config.snapshot_interval,
                   axis_order=config.axis_order,
                   incremental_energy=config.incremental_energy)

    @property
    def remaining(self) -> int:
        return self.vertical_left + self.horizontal_left

    @property
    def done(self) -> bool:
        return self.remaining == 0

    def next_direction(self) -> str:
        """Axis of the next seam according to the axis order policy."""
        if self.done:
            raise InvalidStateError("Resize already reached its target size")
        if self.vertical_left == 0:
            return 'horizontal'
        if self.horizontal_left == 0:
            return 'vertical'

        # A seam can't be found on a 0-wide or 0-high grid, so the axis
        # going down to 0 is finished last.
        if self.config.target_width == 0:
            return 'horizontal'
        if self.config.target_height == 0:
            return 'vertical'

        order = self.config.axis_order
        if order == 'vertical-first':
            return 'vertical'
        if order == 'horizontal-first':
            return 'horizontal'

        first, second = ('vertical', 'horizontal')
        if order == 'alternate-horizontal':
            first, second = second, first
        return second if self._last_direction == first else first

    def _current_energy(self) -> torch.Tensor:
        if self._energy is None:
            return compute_energy(self.grid)
        return self._energy

    def step(self) -> CarveStep:
        """Remove one seam and return what happened."""
        direction = self.next_direction()
        if self._started is None:
            self._started = time.perf_counter()

        energy = self._current_energy()
        seam = dp_seam(energy, direction=direction)
        carved = remove_seam(self.grid, seam, direction=direction)

        if self.config.incremental_energy:
            self._energy = update_energy(energy, carved, seam, direction=direction)

        self.grid = carved
        self._last_direction = direction
        if direction == 'vertical':
            self.vertical_left -= 1
        else:
            self.horizontal_left -= 1
        self.seams_removed += 1

        logger.debug("Removed %s seam %d/%d, now %dx%d", direction,
                     self.seams_removed, self.total_seams, carved.width, carved.height)

        interval = self.config.snapshot_interval
        if self.on_snapshot is not None and interval and self.seams_removed % interval == 0:
            self._snapshot()

        return CarveStep(direction, seam, self.seams_removed, self.total_seams,
                         carved.width, carved.height,
                         elapsed=time.perf_counter() - self._started)

    def _snapshot(self):
        # Export failures are reported, never allowed to stop the carving
        try:
            self.on_snapshot(self.grid)
        except Exception as exc:
            if isinstance(exc, SnapshotIOError):
                error = exc
            else:
                error = SnapshotIOError(
                    f"Snapshot after seam {self.seams_removed} failed: {exc}")
                error.__cause__ = exc
            self.snapshot_errors.append(error)
            logger.warning("Snapshot after seam %d failed: %s", self.seams_removed, exc)

    def __iter__(self) -> Iterator[CarveStep]:
        while not self.done:
            yield self.step()

    def run(self) -> PixelGrid:
        """Carve until the target size is reached and return the result."""
        for _ in self:
            pass
        return self.grid


def resize(grid: PixelGrid, target_width: int, target_height: int,
           on_snapshot: Optional[SnapshotCallback] = None,
           snapshot_interval: int = 1,
           axis_order: str = 'alternate',
           incremental_energy: bool = False) -> PixelGrid:
    """
    Content-aware resize to exactly target_width x target_height.

    Removes grid.width - target_width vertical and grid.height - target_height
    horizontal seams. With the default 'alternate' order one vertical and one
    horizontal seam are removed in turn until one axis is done, then the
    other axis is finished. Energy is recomputed before every seam.

    Args:
        grid: Input image
        target_width: Final width in pixels
        target_height: Final height in pixels
        on_snapshot: Optional progress hook receiving the intermediate grid
        snapshot_interval: Seams between on_snapshot calls (0 disables)
        axis_order: Interleaving policy for the two axes
        incremental_energy: Update energy in a band around each seam

    Returns:
        Carved image. When no seams are requested, a copy of the input.
    """
    carver = Carver(grid, target_width, target_height, on_snapshot=on_snapshot,
                    snapshot_interval=snapshot_interval, axis_order=axis_order,
                    incremental_energy=incremental_energy)
    if carver.done:
        return grid.clone()

    logger.info("Resizing %dx%d -> %dx%d (%d seams)", grid.width, grid.height,
                target_width, target_height, carver.total_seams)
    result = carver.run()
    if carver.snapshot_errors:
        logger.warning("%d snapshot(s) failed during resize", len(carver.snapshot_errors))
    return result


def carve(grid: PixelGrid, n_seams: int, direction: str = 'vertical',
          on_snapshot: Optional[SnapshotCallback] = None,
          snapshot_interval: int = 1) -> PixelGrid:
    """
    Remove n_seams seams along a single axis.

    Args:
        grid: Input image
        n_seams: Number of seams to remove
        direction: 'vertical' (narrower) or 'horizontal' (shorter)

    Returns:
        Carved image
    """
    check_direction(direction)
    grid = require_grid(grid)
    if direction == 'vertical':
        return resize(grid, grid.width - n_seams, grid.height, on_snapshot,
                      snapshot_interval)
    return resize(grid, grid.width, grid.height - n_seams, on_snapshot,
                  snapshot_interval)
