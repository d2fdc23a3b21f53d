"""
Content-aware image shrinking via seam carving.

Energy is the dual-gradient measure, seams are found with dynamic
programming (Avidan & Shamir 2007) and removed one at a time until the
image reaches its target size.
"""

__version__ = "0.1.0"

from .errors import (
    SeamCarvingError,
    InvalidStateError,
    InvalidArgumentError,
    InvalidDimensionError,
    InvalidSeamError,
    UnsupportedDirectionError,
    SnapshotIOError,
    ImageReadError,
    ImageWriteError,
)
from .grid import PixelGrid, pixel_at
from .energy import compute_energy, pixel_energy, update_energy
from .seam import (cumulative_energy, dp_seam, find_seam, seam_energy, validate_seam,
                   remove_seam, mark_seam)
from .config import ResizeConfig, target_from_scale, target_with_aspect, frame_interval
from .carving import Carver, CarveStep, resize, carve

__all__ = [
    'SeamCarvingError',
    'InvalidStateError',
    'InvalidArgumentError',
    'InvalidDimensionError',
    'InvalidSeamError',
    'UnsupportedDirectionError',
    'SnapshotIOError',
    'ImageReadError',
    'ImageWriteError',
    'PixelGrid',
    'pixel_at',
    'compute_energy',
    'pixel_energy',
    'update_energy',
    'cumulative_energy',
    'dp_seam',
    'find_seam',
    'seam_energy',
    'validate_seam',
    'remove_seam',
    'mark_seam',
    'ResizeConfig',
    'target_from_scale',
    'target_with_aspect',
    'frame_interval',
    'Carver',
    'CarveStep',
    'resize',
    'carve',
]
