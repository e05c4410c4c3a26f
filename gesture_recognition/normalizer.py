"""
Landmark normalization shared by training and inference.

The classifier must see the hand shape independent of where the hand is in the
frame and how far it is from the camera, so every frame is made
wrist-relative, scaled by the hand's bounding box, and clipped.
"""
from typing import List

import numpy as np

from .errors import InvalidInputShape
from .types import NUM_LANDMARKS, NUM_COORDS, NUM_FEATURES

MIN_SCALE = 1e-6
CLIP_RANGE = 3.0
WRIST_INDEX = 0


def normalize_landmarks(keypoints, min_scale: float = MIN_SCALE, clip_range: float = CLIP_RANGE) -> np.ndarray:
    """
    Center the hand on the wrist and scale by hand size.

    Input: (63,) or (21, 3). Output: (63,) float32 with values in
    [-clip_range, clip_range] and the wrist at the origin.

    Raises:
        InvalidInputShape: if the input does not hold exactly 63 values
    """
    pts = np.asarray(keypoints, dtype=np.float32)
    if pts.size != NUM_FEATURES:
        raise InvalidInputShape(NUM_FEATURES, pts.size)
    pts = pts.reshape(NUM_LANDMARKS, NUM_COORDS)

    relative = pts - pts[WRIST_INDEX]

    x_range = relative[:, 0].max() - relative[:, 0].min()
    y_range = relative[:, 1].max() - relative[:, 1].min()
    scale = max(float(x_range), float(y_range))
    if scale < min_scale:
        scale = min_scale

    # z is scaled by the same factor as x and y
    scaled = relative / scale
    return np.clip(scaled, -clip_range, clip_range).reshape(-1).astype(np.float32)


def normalize_batch(frames, min_scale: float = MIN_SCALE, clip_range: float = CLIP_RANGE) -> List[np.ndarray]:
    """Normalize each frame of a batch."""
    return [normalize_landmarks(f, min_scale, clip_range) for f in frames]
