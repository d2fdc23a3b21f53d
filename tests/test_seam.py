"""Tests for seam computation and removal."""

import sys
import os
import itertools
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import torch
import pytest
from seamcarve.grid import PixelGrid
from seamcarve.seam import (cumulative_energy, dp_seam, seam_energy, validate_seam,
                            remove_seam, mark_seam)
from seamcarve.errors import InvalidArgumentError, InvalidDimensionError, InvalidSeamError

from conftest import make_index_grid, make_random_grid


def _brute_force_min(energy):
    """Minimum total energy over every connected vertical path."""
    H, W = energy.shape
    best = float('inf')
    for start in range(W):
        for moves in itertools.product((-1, 0, 1), repeat=H - 1):
            cols = [start]
            for m in moves:
                cols.append(cols[-1] + m)
            if all(0 <= c < W for c in cols):
                best = min(best, sum(energy[i, c].item() for i, c in enumerate(cols)))
    return best


class TestCumulativeEnergy:
    def test_first_row_copies_energy(self):
        energy = torch.tensor([[3., 1., 2.], [1., 1., 1.]])
        cumulative, back = cumulative_energy(energy)
        assert torch.equal(cumulative[0], energy[0].double())
        assert (back[0] == -1).all()

    def test_literal_matrix(self):
        energy = torch.tensor([[1., 4., 3.],
                               [2., 0., 5.],
                               [6., 1., 1.]])
        cumulative, back = cumulative_energy(energy)
        expected = torch.tensor([[1., 4., 3.],
                                 [3., 1., 8.],
                                 [7., 2., 2.]], dtype=torch.float64)
        assert torch.equal(cumulative, expected)
        assert back[1].tolist() == [0, 0, 2]
        assert back[2].tolist() == [1, 1, 1]

    def test_every_cell_gets_a_parent(self):
        energy = make_random_grid(20, 20, seed=1).pixels[0].double()
        _, back = cumulative_energy(energy)
        cols = torch.arange(20)
        assert ((back[1:] - cols).abs() <= 1).all()
        assert (back[1:] >= 0).all() and (back[1:] < 20).all()


class TestDPSeam:
    def test_seam_follows_zero_energy_column(self):
        """Given an energy map that's zero in one column, the seam goes there."""
        H, W = 20, 20
        energy = torch.ones(H, W)
        energy[:, 10] = 0.0
        seam = dp_seam(energy, direction='vertical')
        assert (seam == 10).all(), f"Expected all 10, got {seam.tolist()}"

    def test_seam_follows_zero_energy_row(self):
        """Horizontal seam follows zero-energy row."""
        H, W = 20, 20
        energy = torch.ones(H, W)
        energy[10, :] = 0.0
        seam = dp_seam(energy, direction='horizontal')
        assert (seam == 10).all()

    def test_seam_follows_diagonal_valley(self):
        """Seam should follow a diagonal zero-energy path."""
        H, W = 20, 20
        energy = torch.ones(H, W) * 10.0
        for i in range(H):
            energy[i, min(5 + i, W - 1)] = 0.0
        seam = dp_seam(energy, direction='vertical')
        for i in range(H):
            expected = min(5 + i, W - 1)
            assert seam[i].item() == expected, f"Row {i}: got {seam[i]}, expected {expected}"

    def test_avoids_greedy_trap(self):
        """The cheapest start is a dead end; DP must find the globally cheaper path."""
        energy = torch.tensor([[0., 1., 1., 2.],
                               [9., 9., 9., 1.],
                               [9., 9., 9., 1.]])
        seam = dp_seam(energy)
        assert seam.tolist() == [2, 3, 3]

    def test_matches_brute_force(self):
        gen = torch.Generator().manual_seed(7)
        for _ in range(5):
            energy = torch.randint(0, 10, (5, 4), generator=gen).double()
            seam = dp_seam(energy)
            assert seam_energy(energy, seam) == _brute_force_min(energy)

    def test_seam_continuity(self):
        """Adjacent seam indices must differ by at most 1."""
        energy = make_random_grid(50, 50, seed=42).pixels[0].double()
        for direction in ('vertical', 'horizontal'):
            seam = dp_seam(energy, direction=direction)
            assert (seam[1:] - seam[:-1]).abs().max() <= 1

    def test_seam_length_matches_axis(self):
        energy = torch.rand(30, 40)
        assert dp_seam(energy, direction='vertical').shape == (30,)
        assert dp_seam(energy, direction='horizontal').shape == (40,)

    def test_deterministic(self):
        energy = make_random_grid(25, 25, seed=4).pixels[1].double()
        first = dp_seam(energy)
        for _ in range(3):
            assert torch.equal(dp_seam(energy), first)


class TestTieBreak:
    def test_uniform_energy_takes_first_column_straight_down(self):
        """All-equal cumulative values: first minimum in the last row, straight up."""
        seam = dp_seam(torch.zeros(3, 3))
        assert seam.tolist() == [0, 0, 0]

    def test_straight_preferred_over_both_diagonals(self):
        energy = torch.tensor([[0., 0., 0.],
                               [5., 0., 5.],
                               [5., 0., 5.]])
        assert dp_seam(energy).tolist() == [1, 1, 1]

    def test_left_preferred_over_right(self):
        energy = torch.tensor([[0., 9., 0.],
                               [9., 0., 9.]])
        assert dp_seam(energy).tolist() == [0, 1]

    def test_right_taken_only_on_strict_improvement(self):
        energy = torch.tensor([[1., 9., 0.],
                               [9., 0., 9.]])
        assert dp_seam(energy).tolist() == [2, 1]

    def test_horizontal_prefers_upper_row(self):
        """Horizontal analogue: row above wins a tie against the row below."""
        energy = torch.tensor([[0., 9.],
                               [9., 0.],
                               [0., 9.]])
        assert dp_seam(energy, direction='horizontal').tolist() == [0, 1]


class TestDPSeamErrors:
    def test_zero_dimension(self):
        with pytest.raises(InvalidDimensionError):
            dp_seam(torch.zeros(0, 5))
        with pytest.raises(InvalidDimensionError):
            dp_seam(torch.zeros(5, 0), direction='horizontal')

    def test_invalid_direction(self):
        with pytest.raises(InvalidArgumentError):
            dp_seam(torch.zeros(3, 3), direction='diagonal')

    def test_not_a_matrix(self):
        with pytest.raises(InvalidArgumentError):
            dp_seam(torch.zeros(3, 3, 3))

    def test_single_column_and_single_row(self):
        assert dp_seam(torch.rand(6, 1)).tolist() == [0] * 6
        assert dp_seam(torch.rand(1, 6), direction='horizontal').tolist() == [0] * 6


class TestRemoveSeam:
    def test_preserves_non_seam_pixels(self):
        """After removing a seam, remaining pixels should be the original values."""
        grid = make_index_grid(4, 10)
        seam = torch.full((4,), 5, dtype=torch.long)
        carved = remove_seam(grid, seam, direction='vertical')

        assert carved.shape == (4, 9)
        assert carved.pixels[0, 0].tolist() == [0, 1, 2, 3, 4, 6, 7, 8, 9]

    def test_with_varying_positions(self):
        """Seam that zigzags removes correct pixel from each row."""
        grid = make_index_grid(3, 6)
        carved = remove_seam(grid, [2, 3, 2], direction='vertical')

        assert carved.pixels[0, 0].tolist() == [0, 1, 3, 4, 5]
        assert carved.pixels[0, 1].tolist() == [0, 1, 2, 4, 5]
        assert carved.pixels[0, 2].tolist() == [0, 1, 3, 4, 5]
        assert (carved.pixels[1, 1] == 1).all()

    def test_horizontal_removal(self):
        grid = make_index_grid(5, 3)
        carved = remove_seam(grid, [0, 1, 4], direction='horizontal')

        assert carved.shape == (4, 3)
        assert carved.pixels[1, :, 0].tolist() == [1, 2, 3, 4]
        assert carved.pixels[1, :, 1].tolist() == [0, 2, 3, 4]
        assert carved.pixels[1, :, 2].tolist() == [0, 1, 2, 3]
        assert (carved.pixels[0, :, 2] == 2).all()

    def test_reduces_width_by_one(self):
        grid = make_random_grid(20, 30)
        carved = remove_seam(grid, torch.zeros(20, dtype=torch.long), direction='vertical')
        assert carved.shape == (20, 29)
        assert carved.channels == 3

    def test_reduces_height_by_one(self):
        grid = make_random_grid(20, 30)
        carved = remove_seam(grid, torch.zeros(30, dtype=torch.long), direction='horizontal')
        assert carved.shape == (19, 30)

    def test_input_left_untouched(self):
        grid = make_random_grid(6, 6, seed=8)
        before = grid.pixels.clone()
        remove_seam(grid, [1, 2, 3, 3, 2, 1])
        assert torch.equal(grid.pixels, before)

    def test_alpha_carried_verbatim(self):
        grid = make_index_grid(3, 4)
        alpha = (grid.pixels[0] * 10).unsqueeze(0)
        rgba = PixelGrid(torch.cat([grid.pixels, alpha]))
        carved = remove_seam(rgba, [1, 1, 1])
        assert carved.has_alpha
        assert carved.pixels[3, 0].tolist() == [0, 20, 30]

    def test_single_column_to_zero_width(self):
        grid = make_random_grid(5, 1)
        carved = remove_seam(grid, [0] * 5, direction='vertical')
        assert carved.shape == (5, 0)
        assert carved.is_empty

    def test_single_row_to_zero_height(self):
        grid = make_random_grid(1, 5)
        carved = remove_seam(grid, [0] * 5, direction='horizontal')
        assert carved.shape == (0, 5)

    def test_bare_tensor(self):
        energy = torch.arange(12.).view(3, 4)
        carved = remove_seam(energy, [0, 1, 3])
        assert carved.tolist() == [[1., 2., 3.], [4., 6., 7.], [8., 9., 10.]]


class TestValidateSeam:
    def test_length_mismatch(self):
        with pytest.raises(InvalidSeamError):
            validate_seam([0, 0], height=3, width=3)
        with pytest.raises(InvalidSeamError):
            remove_seam(make_random_grid(3, 4), [0, 0, 0], direction='horizontal')

    def test_index_out_of_bounds_is_not_clamped(self):
        with pytest.raises(InvalidSeamError):
            remove_seam(make_random_grid(3, 4), [0, 4, 3])
        with pytest.raises(InvalidSeamError):
            remove_seam(make_random_grid(3, 4), [0, -1, 0])

    def test_returns_long_tensor(self):
        seam = validate_seam([2, 1, 0], height=3, width=3)
        assert seam.dtype == torch.long


class TestMarkSeam:
    def test_paints_seam_pixels_only(self):
        grid = make_index_grid(3, 4)
        marked = mark_seam(grid, [1, 2, 2], color=(255, 255, 255))
        assert marked.pixels[:, 0, 1].tolist() == [255, 255, 255]
        assert marked.pixels[:, 2, 2].tolist() == [255, 255, 255]
        assert marked.pixels[0, 0, 0].item() == 0
        assert grid.pixels[0, 0, 1].item() == 1
