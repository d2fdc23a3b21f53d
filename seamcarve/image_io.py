"""
Image file I/O and progress-frame exporters.

The carving engine never touches files; these helpers decode images into
PixelGrids, encode results, and provide ready-made snapshot callbacks.
"""

import logging
from pathlib import Path
from typing import List, Sequence, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import ImageReadError, ImageWriteError, InvalidArgumentError, SnapshotIOError
from .grid import PixelGrid

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_grid(path: PathLike) -> PixelGrid:
    """
    Load an image file as a uint8 PixelGrid.

    Images with transparency load as RGBA, everything else as RGB.
    """
    path = Path(path)
    try:
        with Image.open(path) as img:
            has_alpha = 'A' in img.getbands() or 'transparency' in img.info
            img = img.convert('RGBA' if has_alpha else 'RGB')
            array = np.array(img, dtype=np.uint8)
    except FileNotFoundError as exc:
        raise ImageReadError(f"Input not found: {path}") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageReadError(f"Failed to open image '{path}': {exc}") from exc

    grid = PixelGrid.from_array(array)
    logger.debug("Loaded %s: %dx%d, %d channels", path, grid.width, grid.height,
                 grid.channels)
    return grid


def to_pil(grid: PixelGrid) -> Image.Image:
    """Convert a grid to a PIL image (RGB or RGBA)."""
    array = grid.to_array()
    if array.dtype != np.uint8:
        array = np.clip(array, 0, 255).astype(np.uint8)
    channels = 4 if grid.has_alpha else 3
    return Image.fromarray(np.ascontiguousarray(array[..., :channels]))


def save_grid(grid: PixelGrid, path: PathLike) -> Path:
    """Encode a grid to path, creating parent directories as needed."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        img = to_pil(grid)
        if grid.has_alpha and path.suffix.lower() in ('.jpg', '.jpeg'):
            img = img.convert('RGB')
        img.save(path)
    except (OSError, ValueError) as exc:
        raise ImageWriteError(f"Failed to save image '{path}': {exc}") from exc
    logger.debug("Saved %s (%dx%d)", path, grid.width, grid.height)
    return path


def default_output_path(path: PathLike, suffix: str = '_resized') -> Path:
    """Output path next to the input: photo.jpg -> photo_resized.jpg"""
    path = Path(path)
    return path.with_name(f"{path.stem}{suffix}{path.suffix}")


class FrameExporter:
    """
    Snapshot callback that writes each frame to a numbered file.

    Args:
        directory: Where frames go (created on first write)
        prefix: File name prefix
        extension: Image format extension
    """

    def __init__(self, directory: PathLike, prefix: str = 'frame',
                 extension: str = 'png'):
        self.directory = Path(directory)
        self.prefix = prefix
        self.extension = extension.lstrip('.')
        self.paths: List[Path] = []

    def __call__(self, grid: PixelGrid):
        path = self.directory / f"{self.prefix}_{len(self.paths):05d}.{self.extension}"
        try:
            save_grid(grid, path)
        except ImageWriteError as exc:
            raise SnapshotIOError(str(exc)) from exc
        self.paths.append(path)


class FrameRecorder:
    """Snapshot callback that keeps copies of the frames in memory."""

    def __init__(self):
        self.frames: List[PixelGrid] = []

    def __call__(self, grid: PixelGrid):
        self.frames.append(grid.clone())


def write_timeline_gif(frames: Sequence[PixelGrid], path: PathLike, fps: int = 10) -> Path:
    """
    Write snapshots as an animated GIF.

    Frames shrink as carving progresses, so each one is pasted at the top-left
    of a canvas the size of the first frame. First and last frames are held
    three times longer.
    """
    if not frames:
        raise ImageWriteError("No frames to write")
    if fps < 1:
        raise InvalidArgumentError(f"fps must be >= 1, got {fps}")

    path = Path(path)
    canvas_size = (frames[0].width, frames[0].height)
    images = []
    for grid in frames:
        canvas = Image.new('RGB', canvas_size)
        canvas.paste(to_pil(grid).convert('RGB'), (0, 0))
        images.append(canvas)

    duration = int(1000 / fps)

    # Hold first and last frames longer
    durations = [duration] * len(images)
    durations[0] = duration * 3
    durations[-1] = duration * 3

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        images[0].save(
            path,
            save_all=True,
            append_images=images[1:],
            duration=durations,
            loop=0,
            optimize=False,
        )
    except (OSError, ValueError) as exc:
        raise ImageWriteError(f"Failed to write GIF '{path}': {exc}") from exc

    logger.info("Wrote %d frames to %s", len(images), path)
    return path


def combine_snapshots(*callbacks):
    """
    One snapshot callback that runs every callback on each frame.

    A failing callback doesn't keep the others from seeing the frame; the
    first failure is re-raised after all of them ran.
    """
    def on_snapshot(grid: PixelGrid):
        failures = []
        for callback in callbacks:
            try:
                callback(grid)
            except SnapshotIOError as exc:
                failures.append(exc)
        if failures:
            raise failures[0]

    return on_snapshot
