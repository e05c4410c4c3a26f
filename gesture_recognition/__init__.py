"""
Temporal Hand Gesture Recognition

Turns a live stream of per-frame hand-landmark detections into a stable,
confidence-scored gesture label despite jitter, occlusion and missed
detections.
"""

__version__ = "0.1.0"

from .types import (
    BufferPolicy, RecognizerPhase, ResultStatus, HandDetection, GestureResult,
    DetectorProto, ClassifierProto,
)
from .errors import (
    GestureRecognitionError, InvalidInputShape, UnsupportedRotation,
    ClassifierUnavailable, DetectorUnavailable, RecognizerInitError,
)
from .config import load_config, Cfg
from .transform import transform_point, transform_landmarks, validate_rotation
from .normalizer import normalize_landmarks, normalize_batch
from .buffers import SequenceBuffer
from .smoothing import PredictionSmoother
from .recognizer import GestureRecognizer

__all__ = [
    "BufferPolicy",
    "RecognizerPhase",
    "ResultStatus",
    "HandDetection",
    "GestureResult",
    "DetectorProto",
    "ClassifierProto",
    "GestureRecognitionError",
    "InvalidInputShape",
    "UnsupportedRotation",
    "ClassifierUnavailable",
    "DetectorUnavailable",
    "RecognizerInitError",
    "load_config",
    "Cfg",
    "transform_point",
    "transform_landmarks",
    "validate_rotation",
    "normalize_landmarks",
    "normalize_batch",
    "SequenceBuffer",
    "PredictionSmoother",
    "GestureRecognizer",
]
