"""
Rolling window of normalized landmark frames fed to the sequence classifier.
"""
from collections import deque
from typing import Optional

import numpy as np

from .errors import InvalidInputShape
from .types import NUM_FEATURES


class SequenceBuffer:
    """
    Fixed-capacity FIFO of the most recent normalized frames.

    Once full, every add evicts the oldest frame, so the buffer is a true
    sliding window rather than a one-shot batch.
    """

    def __init__(self, sequence_length: int = 15, num_features: int = NUM_FEATURES):
        if sequence_length < 1:
            raise ValueError(f"sequence_length must be positive, got {sequence_length}")
        self.sequence_length = sequence_length
        self.num_features = num_features
        self._frames: deque[np.ndarray] = deque(maxlen=sequence_length)

    def add(self, frame) -> None:
        """Append a frame to the back, evicting from the front when over capacity."""
        arr = np.asarray(frame, dtype=np.float32).reshape(-1)
        if arr.size != self.num_features:
            raise InvalidInputShape(self.num_features, arr.size)
        self._frames.append(arr)

    def size(self) -> int:
        return len(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def is_full(self) -> bool:
        return len(self._frames) == self.sequence_length

    @property
    def progress(self) -> float:
        """Fill ratio in [0, 1]."""
        return len(self._frames) / self.sequence_length

    def get_sequence(self) -> Optional[np.ndarray]:
        """
        Return the window as an (N, F) float32 matrix, oldest frame first.

        Returns None while the buffer is still warming up.
        """
        if not self.is_full():
            return None
        return np.stack(self._frames).astype(np.float32)

    def clear(self) -> None:
        self._frames.clear()
