"""
Scripted detector and classifier doubles for testing the recognizer without a camera or model.
"""
from typing import Iterable, List, Optional, Sequence

import numpy as np

from .errors import ClassifierUnavailable
from .types import HandDetection, NUM_LANDMARKS


def synthetic_hand(offset_x: float = 0.5, offset_y: float = 0.5, spread: float = 0.2, seed: int = 0) -> np.ndarray:
    """Return a plausible (21, 3) hand centered near (offset_x, offset_y)."""
    rng = np.random.default_rng(seed)
    pts = rng.uniform(-spread / 2, spread / 2, size=(NUM_LANDMARKS, 3)).astype(np.float32)
    pts[:, 0] += offset_x
    pts[:, 1] += offset_y
    pts[:, 2] *= 0.1
    return pts


class ScriptedDetector:
    """
    Detector that replays a fixed script instead of looking at the image.

    Each script entry is a (21, 3) landmark array, None for a missed detection,
    or an exception instance to raise for that frame. After the script runs out
    the last entry repeats.
    """

    def __init__(self, script: Iterable = ()):
        self.script: List = list(script)
        self.calls = 0
        self.closed = False

    def extend(self, entries: Iterable) -> None:
        self.script.extend(entries)

    def detect(self, image) -> Optional[HandDetection]:
        if not self.script:
            self.calls += 1
            return None
        entry = self.script[min(self.calls, len(self.script) - 1)]
        self.calls += 1
        if isinstance(entry, Exception):
            raise entry
        if entry is None:
            return None
        return HandDetection(landmarks=np.asarray(entry, dtype=np.float32), handedness="Right", score=0.99)

    def close(self) -> None:
        self.closed = True


class ScriptedClassifier:
    """
    Classifier that returns scripted probability vectors.

    Each entry is a probability vector, None (no result), or an exception
    instance to raise. After the script runs out the last entry repeats.
    The sequences it was called with are kept in ``seen``.
    """

    def __init__(self, labels: Sequence[str], script: Iterable = ()):
        self.labels = list(labels)
        self.script: List = list(script)
        self.seen: List[np.ndarray] = []
        self.closed = False

    def predict(self, sequence: np.ndarray) -> Optional[np.ndarray]:
        self.seen.append(np.array(sequence, copy=True))
        if not self.script:
            raise ClassifierUnavailable("no scripted prediction")
        entry = self.script[min(len(self.seen) - 1, len(self.script) - 1)]
        if isinstance(entry, Exception):
            raise entry
        if entry is None:
            return None
        return np.asarray(entry, dtype=np.float32)

    def close(self) -> None:
        self.closed = True


def one_hot(index: int, num_classes: int, confidence: float = 0.9) -> np.ndarray:
    """Probability vector with ``confidence`` at ``index`` and the rest spread evenly."""
    rest = (1.0 - confidence) / (num_classes - 1) if num_classes > 1 else 0.0
    probs = np.full(num_classes, rest, dtype=np.float32)
    probs[index] = confidence
    return probs

