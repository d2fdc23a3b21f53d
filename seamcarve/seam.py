"""
Seam computation and removal.

Seams are found with the classic dynamic-programming pass (Avidan & Shamir
2007): accumulate the cheapest connected path into every cell row by row,
then walk the back pointers up from the cheapest cell in the last row.

Tie-break policy when predecessors have equal cumulative energy:
straight > up-left > up-right. Each replacement needs a strict improvement.
"""

from typing import Sequence, Tuple, Union

import torch

from .errors import InvalidArgumentError, InvalidDimensionError, InvalidSeamError
from .grid import PixelGrid, check_direction

SeamLike = Union[torch.Tensor, Sequence[int]]


def _check_energy(energy: torch.Tensor) -> torch.Tensor:
    if not isinstance(energy, torch.Tensor) or energy.dim() != 2:
        shape = tuple(energy.shape) if isinstance(energy, torch.Tensor) else None
        raise InvalidArgumentError(f"Energy map must be a 2D tensor, got {shape}")
    if energy.shape[0] == 0 or energy.shape[1] == 0:
        raise InvalidDimensionError(
            f"Energy map has a zero dimension: {tuple(energy.shape)}")
    return energy.to(torch.float64)


def cumulative_energy(energy: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Dynamic-programming pass for vertical seams.

    cumulative[i, j] = energy[i, j] + min over the (up to) three cells above.
    Rows depend on the previous row, so the loop runs top to bottom; inside
    a row all columns are updated at once.

    Args:
        energy: Energy map (H, W)

    Returns:
        cumulative: (H, W) float64 minimum path energy ending at each cell
        back: (H, W) int64 column of the chosen predecessor, -1 in row 0
    """
    energy = _check_energy(energy)
    H, W = energy.shape

    cumulative = energy.clone()
    back = torch.full((H, W), -1, dtype=torch.long, device=energy.device)
    cols = torch.arange(W, device=energy.device)

    for i in range(1, H):
        prev = cumulative[i - 1]

        # Default predecessor: straight up
        best = prev.clone()
        parent = cols.clone()

        # Up-left replaces it only on strict improvement
        up_left = torch.full_like(prev, float('inf'))
        up_left[1:] = prev[:-1]
        better = up_left < best
        best = torch.where(better, up_left, best)
        parent = torch.where(better, cols - 1, parent)

        # Up-right must strictly beat whatever was selected so far
        up_right = torch.full_like(prev, float('inf'))
        up_right[:-1] = prev[1:]
        better = up_right < best
        best = torch.where(better, up_right, best)
        parent = torch.where(better, cols + 1, parent)

        cumulative[i] = energy[i] + best
        back[i] = parent

    return cumulative, back


def _first_argmin(values: torch.Tensor) -> int:
    """Index of the first minimum; explicit so ties never depend on the backend."""
    return int(torch.nonzero(values == values.min())[0, 0])


def dp_seam(energy: torch.Tensor, direction: str = 'vertical') -> torch.Tensor:
    """
    Compute the minimum-energy seam with dynamic programming.

    Horizontal seams run the same pass on the transposed map, so the scan
    goes column by column from left to right.

    Args:
        energy: Energy map (H, W)
        direction: 'vertical' or 'horizontal'

    Returns:
        Seam indices - for vertical: (H,) with column index per row
                      for horizontal: (W,) with row index per column
    """
    check_direction(direction)
    energy = _check_energy(energy)
    if direction == 'horizontal':
        energy = energy.t()

    cumulative, back = cumulative_energy(energy)
    n = energy.shape[0]

    seam = torch.empty(n, dtype=torch.long, device=energy.device)
    seam[-1] = _first_argmin(cumulative[-1])
    for i in range(n - 1, 0, -1):
        seam[i - 1] = back[i, seam[i]]

    return seam


find_seam = dp_seam


def seam_energy(energy: torch.Tensor, seam: SeamLike,
                direction: str = 'vertical') -> float:
    """Total energy of the pixels along a seam."""
    check_direction(direction)
    seam = torch.as_tensor(seam, dtype=torch.long)
    steps = torch.arange(seam.shape[0])
    if direction == 'vertical':
        return float(energy[steps, seam].sum())
    return float(energy[seam, steps].sum())


def validate_seam(seam: SeamLike, height: int, width: int,
                  direction: str = 'vertical') -> torch.Tensor:
    """
    Check that a seam fits a height x width grid.

    Returns:
        The seam as an int64 tensor

    Raises:
        InvalidSeamError: wrong length or an index outside the grid
    """
    check_direction(direction)
    try:
        seam = torch.as_tensor(seam, dtype=torch.long)
    except (TypeError, ValueError, RuntimeError) as exc:
        raise InvalidSeamError(f"Seam is not a sequence of integers: {exc}") from exc
    if seam.dim() != 1:
        raise InvalidSeamError(f"Seam must be 1D, got shape {tuple(seam.shape)}")

    length, span = (height, width) if direction == 'vertical' else (width, height)
    if seam.shape[0] != length:
        raise InvalidSeamError(
            f"{direction.capitalize()} seam has length {seam.shape[0]}, "
            f"expected {length}")
    if length and (seam.min() < 0 or seam.max() >= span):
        bad = int(torch.nonzero((seam < 0) | (seam >= span))[0, 0])
        raise InvalidSeamError(
            f"Seam index {int(seam[bad])} at position {bad} outside [0, {span})")
    return seam


def _drop_seam(data: torch.Tensor, seam: torch.Tensor, direction: str) -> torch.Tensor:
    """Remove one entry per row (vertical) or column (horizontal) of (..., H, W)."""
    H, W = data.shape[-2:]

    if direction == 'vertical':
        # Remove one pixel from each row
        carved = torch.empty(*data.shape[:-1], W - 1, dtype=data.dtype, device=data.device)
        for i, col in enumerate(seam.tolist()):
            carved[..., i, :col] = data[..., i, :col]
            carved[..., i, col:] = data[..., i, col + 1:]
    else:
        # Remove one pixel from each column
        carved = torch.empty(*data.shape[:-2], H - 1, W, dtype=data.dtype, device=data.device)
        for j, row in enumerate(seam.tolist()):
            carved[..., :row, j] = data[..., :row, j]
            carved[..., row:, j] = data[..., row + 1:, j]

    return carved


def remove_seam(image: Union[PixelGrid, torch.Tensor], seam: SeamLike,
                direction: str = 'vertical'):
    """
    Remove a seam from an image.

    The input is left untouched; pixels after the seam shift by one so
    relative order is preserved. Removing a seam from a 1-wide (1-high)
    image leaves a 0-wide (0-high) one.

    Args:
        image: PixelGrid, or a bare tensor (H, W) / (C, H, W)
        seam: Seam indices
        direction: 'vertical' or 'horizontal'

    Returns:
        Carved image of the same kind with one column/row removed
    """
    check_direction(direction)
    if isinstance(image, PixelGrid):
        data = image.pixels
    elif isinstance(image, torch.Tensor) and image.dim() in (2, 3):
        data = image
    else:
        raise InvalidArgumentError(
            f"Expected PixelGrid or (H, W)/(C, H, W) tensor, got {type(image).__name__}")

    H, W = data.shape[-2:]
    seam = validate_seam(seam, H, W, direction)
    carved = _drop_seam(data, seam, direction)

    if isinstance(image, PixelGrid):
        return PixelGrid(carved)
    return carved


def mark_seam(grid: PixelGrid, seam: SeamLike, direction: str = 'vertical',
              color: Sequence[int] = (255, 0, 0)) -> PixelGrid:
    """Copy of the grid with the seam painted in a solid color (alpha kept)."""
    seam = validate_seam(seam, grid.height, grid.width, direction)
    pixels = grid.pixels.clone()
    paint = torch.as_tensor(color, dtype=pixels.dtype, device=pixels.device)
    steps = torch.arange(seam.shape[0], device=pixels.device)

    if direction == 'vertical':
        pixels[:3, steps, seam] = paint.unsqueeze(1)
    else:
        pixels[:3, seam, steps] = paint.unsqueeze(1)

    return PixelGrid(pixels)
