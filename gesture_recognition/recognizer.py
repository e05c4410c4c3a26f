"""
Gesture recognizer that turns a stream of camera frames into smoothed gesture labels.
"""
import logging
import threading
from typing import Optional

import numpy as np

from .buffers import SequenceBuffer
from .config import Cfg
from .errors import ClassifierUnavailable, DetectorUnavailable, InvalidInputShape, RecognizerInitError
from .normalizer import normalize_landmarks, MIN_SCALE, CLIP_RANGE
from .smoothing import PredictionSmoother
from .transform import transform_landmarks
from .types import (
    BufferPolicy, ClassifierProto, DetectorProto, GestureResult, HandDetection,
    NUM_FEATURES, RecognizerPhase, ResultStatus,
)

logger = logging.getLogger(__name__)


class GestureRecognizer:
    """
    Rolling-window gesture recognizer.

    Features:
    - Sliding sequence buffer of normalized frames
    - Continuous or single-shot prediction once the buffer is full
    - Majority-vote smoothing of the predicted label
    - Missed-frame hysteresis before treating the hand as lost

    Frames must be processed one at a time in arrival order. ``process_frame``
    and ``reset`` hold an internal lock, so a reset can never interleave with
    an in-flight frame.
    """

    def __init__(self, detector: DetectorProto, classifier: ClassifierProto,
                 sequence_length: int = 15,
                 num_features: int = NUM_FEATURES,
                 max_missed_frames: int = 3,
                 policy: BufferPolicy = BufferPolicy.CONTINUOUS,
                 smoother: Optional[PredictionSmoother] = None,
                 min_scale: float = MIN_SCALE,
                 clip_range: float = CLIP_RANGE):
        """Initialize the recognizer with its detector and classifier."""
        if detector is None:
            raise RecognizerInitError("Hand detector is not available")
        if classifier is None:
            raise RecognizerInitError("Gesture classifier is not available")
        labels = getattr(classifier, 'labels', None)
        if labels is None or len(labels) == 0:
            raise RecognizerInitError("Gesture classifier has no class labels")

        self.detector = detector
        self.classifier = classifier
        self.labels = list(labels)
        self.max_missed_frames = max_missed_frames
        self.policy = BufferPolicy(policy)
        self.min_scale = min_scale
        self.clip_range = clip_range

        self.sequence_buffer = SequenceBuffer(sequence_length, num_features)
        self.smoother = smoother if smoother is not None else PredictionSmoother()

        self.frame_count = 0
        self.missed_frame_count = 0
        self.last_landmarks: Optional[np.ndarray] = None
        self.phase = RecognizerPhase.NO_HAND
        self._lock = threading.Lock()
        self._closed = False

        logger.info(
            f"GestureRecognizer initialized: {len(self.labels)} classes, "
            f"sequence_length={sequence_length}, policy={self.policy.value}"
        )

    @classmethod
    def from_config(cls, cfg: Cfg, detector: DetectorProto, classifier: ClassifierProto) -> "GestureRecognizer":
        """Build a recognizer from the recognizer/normalization/smoothing config sections."""
        smoother = PredictionSmoother(
            window_size=cfg.smoothing.window_size,
            stability_threshold=cfg.smoothing.stability_threshold,
            min_samples=cfg.smoothing.min_samples
        )
        return cls(
            detector,
            classifier,
            sequence_length=cfg.recognizer.sequence_length,
            num_features=cfg.recognizer.num_features,
            max_missed_frames=cfg.recognizer.max_missed_frames,
            policy=cfg.recognizer.policy,
            smoother=smoother,
            min_scale=cfg.normalization.min_scale,
            clip_range=cfg.normalization.clip_range
        )

    @property
    def num_classes(self) -> int:
        return len(self.labels)

    @property
    def buffer_size(self) -> int:
        return self.sequence_buffer.size()

    def process_frame(self, image, rotation: Optional[int] = 0, mirror: bool = False) -> GestureResult:
        """
        Process one frame and return its gesture result.

        Args:
            image: Decoded camera frame handed to the detector
            rotation: Sensor rotation in degrees (None or 0 when unknown)
            mirror: True for front-facing capture

        Returns:
            GestureResult for this frame
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("GestureRecognizer is closed")
            self.frame_count += 1

            detection = self._detect(image)
            if detection is None:
                return self._handle_missed_frame()

            try:
                display = transform_landmarks(detection.landmarks, rotation, mirror)
                normalized = normalize_landmarks(display, self.min_scale, self.clip_range)
            except InvalidInputShape as e:
                logger.warning(f"Rejected frame {self.frame_count}: {e}")
                return self._handle_missed_frame()

            self.missed_frame_count = 0
            self.last_landmarks = display
            self.sequence_buffer.add(normalized)

            if not self.sequence_buffer.is_full():
                self.phase = RecognizerPhase.COLLECTING
                return GestureResult(
                    label=None,
                    confidence=0.0,
                    probabilities=self._empty_probabilities(),
                    hand_detected=True,
                    buffer_progress=self.sequence_buffer.progress,
                    status=ResultStatus.COLLECTING,
                    handedness=detection.handedness
                )

            self.phase = RecognizerPhase.PREDICTING
            result = self._predict(detection)

            if self.policy == BufferPolicy.SINGLE_SHOT:
                self.sequence_buffer.clear()
            return result

    def _detect(self, image) -> Optional[HandDetection]:
        try:
            return self.detector.detect(image)
        except DetectorUnavailable as e:
            logger.warning(f"Detector unavailable on frame {self.frame_count}: {e}")
            return None

    def _handle_missed_frame(self) -> GestureResult:
        """Count a missed detection and clear buffers once the hand is truly lost."""
        self.missed_frame_count += 1
        self.last_landmarks = None
        self.phase = RecognizerPhase.NO_HAND

        if self.missed_frame_count > self.max_missed_frames:
            if self.sequence_buffer.size() > 0 or len(self.smoother) > 0:
                self.sequence_buffer.clear()
                self.smoother.clear()
                logger.info(f"Buffer cleared after {self.missed_frame_count} missed frames")

        return GestureResult(
            label=None,
            confidence=0.0,
            probabilities=self._empty_probabilities(),
            hand_detected=False,
            buffer_progress=0.0,
            status=ResultStatus.NO_HAND
        )

    def _predict(self, detection: HandDetection) -> GestureResult:
        """Classify the full window and smooth the predicted label."""
        sequence = self.sequence_buffer.get_sequence()

        try:
            probabilities = self.classifier.predict(sequence)
        except (ClassifierUnavailable, InvalidInputShape) as e:
            logger.warning(f"Classifier unavailable: {e}")
            probabilities = None

        if probabilities is not None:
            probabilities = np.asarray(probabilities, dtype=np.float32).reshape(-1)
            if probabilities.size != self.num_classes:
                logger.warning(
                    f"Classifier returned {probabilities.size} probabilities, expected {self.num_classes}"
                )
                probabilities = None

        if probabilities is None:
            logger.warning("Prediction returned nothing")
            return GestureResult(
                label=None,
                confidence=0.0,
                probabilities=self._empty_probabilities(),
                hand_detected=True,
                buffer_progress=1.0,
                status=ResultStatus.PREDICTION_FAILED,
                handedness=detection.handedness
            )

        top_idx = int(np.argmax(probabilities))
        confidence = float(probabilities[top_idx])

        self.smoother.add_prediction(top_idx)
        smoothed_idx = self.smoother.get_smoothed_prediction()
        if smoothed_idx is None:
            smoothed_idx = top_idx

        return GestureResult(
            label=self.labels[smoothed_idx],
            confidence=confidence,
            probabilities=probabilities,
            hand_detected=True,
            buffer_progress=1.0,
            is_stable=self.smoother.is_stable(),
            status=ResultStatus.PREDICTED,
            handedness=detection.handedness
        )

    def _empty_probabilities(self) -> np.ndarray:
        return np.zeros(self.num_classes, dtype=np.float32)

    def reset(self) -> None:
        """Clear all temporal state. Safe to call between frames."""
        with self._lock:
            self.sequence_buffer.clear()
            self.smoother.clear()
            self.frame_count = 0
            self.missed_frame_count = 0
            self.last_landmarks = None
            self.phase = RecognizerPhase.NO_HAND
        logger.info("GestureRecognizer reset")

    def state_info(self) -> str:
        """Multi-line summary of the recognizer state for debugging overlays."""
        return "\n".join([
            f"Frame: {self.frame_count}",
            f"Buffer: {self.sequence_buffer.size()}/{self.sequence_buffer.sequence_length}",
            f"Missed frames: {self.missed_frame_count}",
            f"Stable: {self.smoother.is_stable()}",
        ])

    def close(self) -> None:
        """Release detector and classifier resources."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            for name, resource in (("detector", self.detector), ("classifier", self.classifier)):
                try:
                    resource.close()
                except Exception as e:
                    logger.error(f"Error releasing {name}: {e}")
            logger.info("GestureRecognizer resources released")

    def __enter__(self) -> "GestureRecognizer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
