"""
Type definitions for the temporal gesture recognition pipeline.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol, runtime_checkable

import numpy as np


NUM_LANDMARKS = 21
NUM_COORDS = 3
NUM_FEATURES = NUM_LANDMARKS * NUM_COORDS  # 63

NO_HAND_TEXT = "No hand detected"
COLLECTING_TEXT = "Collecting frames..."
PREDICTION_FAILED_TEXT = "Prediction failed"


class BufferPolicy(str, Enum):
    """When the recognizer invokes the classifier once the sequence buffer is full."""
    CONTINUOUS = "continuous"  # predict every frame over the sliding window
    SINGLE_SHOT = "single_shot"  # predict once, then collect a fresh window


class RecognizerPhase(str, Enum):
    """State of the recognizer after the most recent frame."""
    NO_HAND = "no_hand"
    COLLECTING = "collecting"
    PREDICTING = "predicting"


class ResultStatus(str, Enum):
    """What kind of result a frame produced."""
    NO_HAND = "no_hand"
    COLLECTING = "collecting"
    PREDICTED = "predicted"
    PREDICTION_FAILED = "prediction_failed"


@dataclass
class HandDetection:
    """One detected hand: 21 (x, y, z) landmarks in normalized image coordinates."""
    landmarks: np.ndarray  # shape (21, 3)
    handedness: Optional[str] = None
    score: Optional[float] = None


@dataclass
class GestureResult:
    """Per-frame output of the recognizer."""
    label: Optional[str]
    confidence: float
    probabilities: np.ndarray
    hand_detected: bool
    buffer_progress: float
    is_stable: bool = False
    status: ResultStatus = ResultStatus.PREDICTED
    handedness: Optional[str] = field(default=None, compare=False)

    def meets_threshold(self, threshold: float) -> bool:
        """True when this is a real prediction at or above the given confidence."""
        return (
            self.status == ResultStatus.PREDICTED
            and self.label is not None
            and self.confidence >= threshold
        )

    @property
    def display_text(self) -> str:
        """Human readable text for overlays."""
        if self.status == ResultStatus.NO_HAND:
            return NO_HAND_TEXT
        if self.status == ResultStatus.COLLECTING:
            return COLLECTING_TEXT
        if self.status == ResultStatus.PREDICTION_FAILED:
            return PREDICTION_FAILED_TEXT
        return format_label(self.label or "")


def format_label(label: str) -> str:
    """Turn a class label like ``thumbs_up`` into ``Thumbs Up``."""
    return label.replace("_", " ").title()


@runtime_checkable
class DetectorProto(Protocol):
    """Hand landmark detector: image in, zero or one hand out."""

    def detect(self, image: np.ndarray) -> Optional[HandDetection]:
        """Return the first detected hand, or None if no hand is visible."""
        ...

    def close(self) -> None:
        """Release detector resources."""
        ...


@runtime_checkable
class ClassifierProto(Protocol):
    """Sequence classifier: (N, F) matrix in, per-class probabilities out."""

    labels: list

    def predict(self, sequence: np.ndarray) -> Optional[np.ndarray]:
        """Return a probability vector of length ``len(labels)``, or None on failure."""
        ...

    def close(self) -> None:
        """Release classifier resources."""
        ...
