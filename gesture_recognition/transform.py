"""
Sensor-space to display-space landmark transform.

The detector reports landmarks relative to the raw sensor image. Before
normalization they are rotated into the display orientation and, for
front-facing capture, mirrored horizontally. Rotation is applied first and
mirroring second; the reverse order gives wrong results at 90 and 270 degrees.
"""
import logging
from typing import Optional, Tuple

import numpy as np

from .errors import InvalidInputShape, UnsupportedRotation
from .types import NUM_LANDMARKS, NUM_COORDS, NUM_FEATURES

logger = logging.getLogger(__name__)

SUPPORTED_ROTATIONS = (0, 90, 180, 270)


def validate_rotation(rotation: Optional[int], strict: bool = False) -> int:
    """
    Return ``rotation`` if supported, otherwise 0. None means no metadata (0 degrees).

    Args:
        rotation: Rotation in degrees
        strict: Raise UnsupportedRotation instead of falling back to identity

    Returns:
        The rotation to apply
    """
    if rotation is None:
        return 0
    if rotation in SUPPORTED_ROTATIONS:
        return int(rotation)
    if strict:
        raise UnsupportedRotation(rotation)
    logger.warning(f"Unsupported rotation {rotation}, falling back to identity")
    return 0


def transform_point(x: float, y: float, rotation: Optional[int] = 0, mirror: bool = False) -> Tuple[float, float]:
    """
    Map one landmark from sensor space to display space.

    Args:
        x, y: Normalized sensor coordinates in [0..1]
        rotation: Sensor rotation in degrees (0, 90, 180 or 270)
        mirror: Flip horizontally after rotation

    Returns:
        (x, y) in normalized display coordinates
    """
    rotation = validate_rotation(rotation)

    if rotation == 90:
        x, y = 1.0 - y, x
    elif rotation == 180:
        x, y = 1.0 - x, 1.0 - y
    elif rotation == 270:
        x, y = y, 1.0 - x

    if mirror:
        x = 1.0 - x

    return x, y


def transform_landmarks(points, rotation: Optional[int] = 0, mirror: bool = False) -> np.ndarray:
    """
    Transform a full hand into 63 contiguous display-space floats.

    z is passed through unchanged.

    Args:
        points: 21 (x, y, z) landmarks, as a (21, 3) or flat (63,) array
        rotation: Sensor rotation in degrees
        mirror: Flip horizontally after rotation

    Returns:
        (63,) float32 array of [x, y, z] per landmark
    """
    pts = np.asarray(points, dtype=np.float32)
    if pts.size != NUM_FEATURES:
        raise InvalidInputShape(NUM_FEATURES, pts.size)
    pts = pts.reshape(NUM_LANDMARKS, NUM_COORDS)

    # one warning per frame
    rotation = validate_rotation(rotation)

    out = np.empty_like(pts)
    for i, (x, y, z) in enumerate(pts):
        out[i, 0], out[i, 1] = transform_point(float(x), float(y), rotation, mirror)
        out[i, 2] = z
    return out.reshape(-1)
