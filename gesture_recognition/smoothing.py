"""
Temporal smoothing of per-frame class predictions.

Classifier output flickers near decision boundaries. A majority vote over a
short trailing window suppresses single-frame flicker without the lag of a
long window.
"""
from collections import Counter, deque
from typing import Optional

DEFAULT_WINDOW_SIZE = 5
DEFAULT_STABILITY_THRESHOLD = 0.6
DEFAULT_MIN_SAMPLES = 3


class PredictionSmoother:
    """
    Majority vote over the last ``window_size`` class indices.

    Ties between equally frequent classes go to the class seen most recently.
    """

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE,
                 stability_threshold: float = DEFAULT_STABILITY_THRESHOLD,
                 min_samples: int = DEFAULT_MIN_SAMPLES):
        if window_size < 1:
            raise ValueError(f"window_size must be positive, got {window_size}")
        if not 0.0 < stability_threshold <= 1.0:
            raise ValueError(f"stability_threshold must be in (0, 1], got {stability_threshold}")
        self.window_size = window_size
        self.stability_threshold = stability_threshold
        self.min_samples = min_samples
        self.history: deque[int] = deque(maxlen=window_size)

    def add_prediction(self, class_index: int) -> None:
        self.history.append(int(class_index))

    def _mode(self):
        counts = Counter(self.history)
        best_count = max(counts.values())
        for idx in reversed(self.history):
            if counts[idx] == best_count:
                return idx, best_count

    def get_smoothed_prediction(self) -> Optional[int]:
        """Most frequent class index in the window, or None if empty."""
        if not self.history:
            return None
        idx, _ = self._mode()
        return idx

    def is_stable(self) -> bool:
        """True when the mode holds at least ``stability_threshold`` of the window."""
        if not self.history or len(self.history) < self.min_samples:
            return False
        _, count = self._mode()
        return count / len(self.history) >= self.stability_threshold

    def clear(self) -> None:
        self.history.clear()

    def __len__(self) -> int:
        return len(self.history)
