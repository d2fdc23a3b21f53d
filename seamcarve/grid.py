"""
Pixel grid: the working image representation.

A PixelGrid wraps a (C, H, W) tensor. Channels 0..2 are color; a fourth
channel is alpha and is carried along untouched. Grids are treated as
values: carving never writes into an existing grid, it builds a new one.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import torch

from .errors import InvalidArgumentError, InvalidStateError

DIRECTIONS = ('vertical', 'horizontal')


def check_direction(direction: str) -> str:
    if direction not in DIRECTIONS:
        raise InvalidArgumentError(
            f"Invalid direction: {direction!r}. Must be 'vertical' or 'horizontal'.")
    return direction


@dataclass(frozen=True, eq=False)
class PixelGrid:
    """
    Image buffer of H x W samples with C channels each.

    Args:
        pixels: Tensor (C, H, W) with C >= 3; C == 4 means RGBA
    """

    pixels: torch.Tensor

    def __post_init__(self):
        if not isinstance(self.pixels, torch.Tensor):
            raise InvalidArgumentError(
                f"pixels must be a torch.Tensor, got {type(self.pixels).__name__}")
        if self.pixels.dim() != 3:
            raise InvalidArgumentError(
                f"pixels must have shape (C, H, W), got {tuple(self.pixels.shape)}")
        if self.pixels.shape[0] < 3:
            raise InvalidArgumentError(
                f"pixels need at least 3 color channels, got {self.pixels.shape[0]}")

    @classmethod
    def from_array(cls, array) -> 'PixelGrid':
        """Build a grid from an (H, W, C) array, the layout image decoders use."""
        if isinstance(array, np.ndarray):
            tensor = torch.from_numpy(np.ascontiguousarray(array))
        elif isinstance(array, torch.Tensor):
            tensor = array
        else:
            raise InvalidArgumentError(
                f"Expected numpy array or tensor, got {type(array).__name__}")
        if tensor.dim() != 3:
            raise InvalidArgumentError(
                f"array must have shape (H, W, C), got {tuple(tensor.shape)}")
        return cls(tensor.permute(2, 0, 1).contiguous())

    def to_array(self) -> np.ndarray:
        """Return a copy of the pixels as an (H, W, C) numpy array."""
        return self.pixels.permute(1, 2, 0).cpu().numpy().copy()

    @property
    def channels(self) -> int:
        return self.pixels.shape[0]

    @property
    def height(self) -> int:
        return self.pixels.shape[1]

    @property
    def width(self) -> int:
        return self.pixels.shape[2]

    @property
    def shape(self) -> Tuple[int, int]:
        """(height, width)"""
        return self.height, self.width

    @property
    def has_alpha(self) -> bool:
        return self.channels == 4

    @property
    def is_empty(self) -> bool:
        return self.height == 0 or self.width == 0

    def color(self) -> torch.Tensor:
        """Color channels (3, H, W) as float64, alpha excluded."""
        return self.pixels[:3].to(torch.float64)

    def clone(self) -> 'PixelGrid':
        return PixelGrid(self.pixels.clone())

    def equals(self, other: 'PixelGrid') -> bool:
        """True when both grids hold identical samples (shape and dtype included)."""
        return (self.pixels.dtype == other.pixels.dtype
                and torch.equal(self.pixels, other.pixels))


def require_grid(grid) -> PixelGrid:
    """Reject absent or empty grids before any carving work starts."""
    if grid is None:
        raise InvalidStateError("No image loaded: grid is None")
    if not isinstance(grid, PixelGrid):
        raise InvalidArgumentError(
            f"Expected PixelGrid, got {type(grid).__name__}")
    if grid.is_empty:
        raise InvalidStateError(
            f"Grid is empty: {grid.width}x{grid.height}")
    return grid


def pixel_at(grid: PixelGrid, row: int, col: int) -> torch.Tensor:
    """
    Channel sample at (row, col).

    Pure lookup on the grid passed in; no state is kept between calls.

    Returns:
        Tensor (C,) with every channel, alpha included
    """
    if not (0 <= row < grid.height) or not (0 <= col < grid.width):
        raise InvalidArgumentError(
            f"Pixel ({row}, {col}) outside {grid.height}x{grid.width} grid")
    return grid.pixels[:, row, col]
