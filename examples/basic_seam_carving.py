"""
Basic seam carving example.

Loads an image (or builds a synthetic one), shows its energy map and first
seam, and shrinks it with the alternating vertical/horizontal schedule.

Usage:
    python examples/basic_seam_carving.py [image] [--scale 70]
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import argparse

import torch
import matplotlib.pyplot as plt

from seamcarve.grid import PixelGrid
from seamcarve.energy import compute_energy
from seamcarve.seam import dp_seam, mark_seam
from seamcarve.carving import Carver
from seamcarve.config import target_from_scale
from seamcarve.image_io import FrameRecorder, load_grid, write_timeline_gif


def synthetic_image(H=120, W=160):
    """Sky, ground and a red disc: plenty of low-energy background."""
    pixels = torch.zeros(3, H, W, dtype=torch.uint8)
    pixels[:, :H // 2] = torch.tensor([135, 190, 235], dtype=torch.uint8).view(3, 1, 1)
    pixels[:, H // 2:] = torch.tensor([80, 140, 60], dtype=torch.uint8).view(3, 1, 1)
    yy, xx = torch.meshgrid(torch.arange(H), torch.arange(W), indexing='ij')
    disc = (yy - H // 2) ** 2 + (xx - W // 3) ** 2 < (H // 5) ** 2
    pixels[0][disc] = 220
    pixels[1][disc] = 40
    pixels[2][disc] = 40
    return PixelGrid(pixels)


def main():
    parser = argparse.ArgumentParser(description="Seam carving demo")
    parser.add_argument('image', nargs='?', help='Input image (default: synthetic)')
    parser.add_argument('--scale', type=float, default=70, help='Target size in percent')
    parser.add_argument('--gif', type=str, default=None, help='Save a progress GIF')
    args = parser.parse_args()

    grid = load_grid(args.image) if args.image else synthetic_image()
    target_w, target_h = target_from_scale(grid.width, grid.height, args.scale)
    print(f"Carving {grid.width}x{grid.height} -> {target_w}x{target_h}")

    energy = compute_energy(grid)
    first_seam = dp_seam(energy, direction='vertical')
    with_seam = mark_seam(grid, first_seam, direction='vertical')

    recorder = FrameRecorder()
    recorder(grid)
    carver = Carver(grid, target_w, target_h, on_snapshot=recorder,
                    snapshot_interval=max(1, (grid.width - target_w) // 10))
    for step in carver:
        if step.seams_removed % 10 == 0:
            print(f"  {step.seams_removed}/{step.total_seams} seams")
    result = carver.grid

    if args.gif:
        recorder(result)
        write_timeline_gif(recorder.frames, args.gif)
        print(f"Saved: {args.gif}")

    fig, axes = plt.subplots(1, 4, figsize=(16, 4))
    axes[0].imshow(grid.to_array()[..., :3])
    axes[0].set_title(f'Original {grid.width}x{grid.height}')
    axes[1].imshow(energy.log1p().numpy(), cmap='magma')
    axes[1].set_title('Energy (log)')
    axes[2].imshow(with_seam.to_array()[..., :3])
    axes[2].set_title('First vertical seam')
    axes[3].imshow(result.to_array()[..., :3])
    axes[3].set_title(f'Carved {result.width}x{result.height}')
    for ax in axes:
        ax.axis('off')
    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
