"""
Energy functions for seam carving.

The energy function determines which pixels are "important".
Low-energy seams are preferred for removal.

Energy here is the dual-gradient measure: for each pixel, the squared RGB
distance between its two vertical neighbors plus the squared RGB distance
between its two horizontal neighbors. On the image border the pair falls
back to the pixel itself and its one inner neighbor. Values stay in raw
squared-intensity units with no normalization.
"""

import torch

from .grid import PixelGrid, check_direction, pixel_at, require_grid
from .seam import remove_seam


def _neighbor_index(n: int, device=None):
    """Indices of the (before, after) neighbors along an axis of length n."""
    idx = torch.arange(n, device=device)
    before = (idx - 1).clamp(min=0)
    after = (idx + 1).clamp(max=n - 1)
    return before, after


def _energy_from_color(color: torch.Tensor) -> torch.Tensor:
    """Dual-gradient energy of a (3, H, W) float64 color tensor."""
    _, H, W = color.shape
    up, down = _neighbor_index(H, color.device)
    left, right = _neighbor_index(W, color.device)

    dy = color[:, up, :] - color[:, down, :]
    dx = color[:, :, left] - color[:, :, right]

    return (dy ** 2).sum(dim=0) + (dx ** 2).sum(dim=0)


def compute_energy(grid: PixelGrid) -> torch.Tensor:
    """
    Compute dual-gradient energy for every pixel.

    E(r, c) = ||I(r-1, c) - I(r+1, c)||^2 + ||I(r, c-1) - I(r, c+1)||^2

    Row 0 compares rows 0 and 1, the last row compares the last two rows;
    columns behave the same way. A dimension of length 1 contributes zero.
    Alpha is ignored.

    Args:
        grid: PixelGrid (C, H, W)

    Returns:
        Energy map (H, W), float64, non-negative
    """
    grid = require_grid(grid)
    return _energy_from_color(grid.color())


def pixel_energy(grid: PixelGrid, row: int, col: int) -> float:
    """Energy of a single pixel, computed straight from the neighbor samples."""
    H, W = grid.shape
    above = pixel_at(grid, max(row - 1, 0), col)[:3].to(torch.float64)
    below = pixel_at(grid, min(row + 1, H - 1), col)[:3].to(torch.float64)
    left = pixel_at(grid, row, max(col - 1, 0))[:3].to(torch.float64)
    right = pixel_at(grid, row, min(col + 1, W - 1))[:3].to(torch.float64)
    return float(((above - below) ** 2).sum() + ((left - right) ** 2).sum())


def update_energy(energy: torch.Tensor, grid: PixelGrid, seam: torch.Tensor,
                  direction: str = 'vertical') -> torch.Tensor:
    """
    Update an energy map after a seam removal, recomputing only a band.

    Removing a seam only changes the neighbors of pixels next to it. For a
    vertical seam s, row r only needs columns
    min(s[r-1], s[r], s[r+1]) - 1 .. max(s[r-1], s[r], s[r+1]) (in the carved
    grid) recomputed; everything else is copied over. The result is identical
    to compute_energy(grid).

    Args:
        energy: Energy map (H, W) of the grid *before* the removal
        grid: PixelGrid *after* the removal
        seam: The seam that was removed
        direction: 'vertical' or 'horizontal'

    Returns:
        Energy map matching grid
    """
    check_direction(direction)
    seam = torch.as_tensor(seam, dtype=torch.long)
    trimmed = remove_seam(energy, seam, direction=direction)
    if grid.is_empty:
        return trimmed

    color = grid.color()
    if direction == 'horizontal':
        # Transpose so rows are the scan axis; the energy formula is symmetric.
        color = color.transpose(1, 2)
        trimmed = trimmed.t()

    _, H, W = color.shape
    up, down = (idx.tolist() for idx in _neighbor_index(H))
    seam_list = seam.tolist()

    for i in range(H):
        near = seam_list[up[i]], seam_list[i], seam_list[down[i]]
        lo = max(min(near) - 1, 0)
        hi = min(max(near), W - 1)
        if lo > hi:
            continue
        cols = torch.arange(lo, hi + 1)
        left = (cols - 1).clamp(min=0)
        right = (cols + 1).clamp(max=W - 1)
        dy = color[:, up[i], lo:hi + 1] - color[:, down[i], lo:hi + 1]
        dx = color[:, i, left] - color[:, i, right]
        trimmed[i, lo:hi + 1] = (dy ** 2).sum(dim=0) + (dx ** 2).sum(dim=0)

    if direction == 'horizontal':
        trimmed = trimmed.t().contiguous()

    return trimmed

