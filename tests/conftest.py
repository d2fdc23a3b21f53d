"""Shared test fixtures for the seamcarve test suite."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import torch
import pytest
from seamcarve.grid import PixelGrid


def make_uniform_grid(H, W, value=(120, 60, 30), alpha=None):
    """Solid-color uint8 grid, optionally with a constant alpha channel."""
    channels = list(value) if alpha is None else list(value) + [alpha]
    color = torch.tensor(channels, dtype=torch.uint8).view(-1, 1, 1)
    return PixelGrid(color.expand(len(channels), H, W).clone())


def make_random_grid(H, W, seed=0, channels=3):
    """Random uint8 grid from a fixed seed."""
    gen = torch.Generator().manual_seed(seed)
    return PixelGrid(torch.randint(0, 256, (channels, H, W), dtype=torch.uint8,
                                   generator=gen))


def make_index_grid(H, W):
    """Grid whose red channel holds the column index and green the row index."""
    pixels = torch.zeros(3, H, W, dtype=torch.uint8)
    pixels[0] = torch.arange(W, dtype=torch.uint8).unsqueeze(0).expand(H, W)
    pixels[1] = torch.arange(H, dtype=torch.uint8).unsqueeze(1).expand(H, W)
    return PixelGrid(pixels)


def make_stripe_grid(H=10, W=10):
    """Black image with a white diagonal stripe at column 2 + row // 2."""
    pixels = torch.zeros(3, H, W, dtype=torch.uint8)
    for r in range(H):
        pixels[:, r, 2 + r // 2] = 255
    return PixelGrid(pixels)


@pytest.fixture
def random_grid():
    """Standard 12x16 random RGB grid."""
    return make_random_grid(12, 16, seed=42)
