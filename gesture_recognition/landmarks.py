"""
Hand landmark detection using MediaPipe.
"""
import logging

import cv2
import mediapipe as mp
import numpy as np
from typing import Optional

from .errors import DetectorUnavailable, RecognizerInitError
from .types import HandDetection, NUM_LANDMARKS

logger = logging.getLogger(__name__)

# MediaPipe hand skeleton, pairs of landmark indices
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),
    (0, 5), (5, 6), (6, 7), (7, 8),
    (5, 9), (9, 10), (10, 11), (11, 12),
    (9, 13), (13, 14), (14, 15), (15, 16),
    (13, 17), (17, 18), (18, 19), (19, 20),
    (0, 17),
]


class HandsTracker:
    """Hand landmark detector using MediaPipe Hands."""

    def __init__(self, max_num_hands: int = 1, min_detection_conf: float = 0.7, min_tracking_conf: float = 0.5):
        """
        Initialize the hands tracker.

        Args:
            max_num_hands: Maximum number of hands to detect (only the first is reported)
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking

        Raises:
            RecognizerInitError: if MediaPipe fails to initialize
        """
        try:
            self.mp_hands = mp.solutions.hands
            self.hands = self.mp_hands.Hands(
                static_image_mode=False,
                max_num_hands=max_num_hands,
                min_detection_confidence=min_detection_conf,
                min_tracking_confidence=min_tracking_conf
            )
        except Exception as e:
            raise RecognizerInitError(f"Failed to initialize MediaPipe: {e}") from e
        logger.info("MediaPipe Hands initialized")

    def detect(self, frame_bgr: np.ndarray) -> Optional[HandDetection]:
        """
        Process a frame and return the first hand's landmarks.

        Args:
            frame_bgr: Input frame in BGR format

        Returns:
            HandDetection with 21 (x, y, z) landmarks, or None if no hand detected
        """
        try:
            # Convert BGR to RGB for MediaPipe
            frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
            results = self.hands.process(frame_rgb)
        except Exception as e:
            raise DetectorUnavailable(f"Landmark extraction failed: {e}") from e

        if not results.multi_hand_landmarks:
            return None

        hand_landmarks = results.multi_hand_landmarks[0]
        if len(hand_landmarks.landmark) != NUM_LANDMARKS:
            logger.warning(f"Expected {NUM_LANDMARKS} landmarks, got {len(hand_landmarks.landmark)}")
            return None

        points = np.array(
            [[lm.x, lm.y, lm.z] for lm in hand_landmarks.landmark],
            dtype=np.float32
        )

        handedness = None
        score = None
        if results.multi_handedness:
            category = results.multi_handedness[0].classification[0]
            handedness = category.label
            score = float(category.score)

        return HandDetection(landmarks=points, handedness=handedness, score=score)

    def close(self) -> None:
        """Release MediaPipe resources."""
        self.hands.close()
        logger.info("MediaPipe resources released")


def draw_landmarks(frame: np.ndarray, landmarks) -> np.ndarray:
    """
    Draw the hand skeleton on the frame.

    Args:
        frame: Input frame
        landmarks: 21 display-space (x, y, z) landmarks in [0..1] range, flat or (21, 3)

    Returns:
        Frame with landmarks drawn
    """
    height, width = frame.shape[:2]
    pts = np.asarray(landmarks, dtype=np.float32).reshape(NUM_LANDMARKS, -1)

    # Convert normalized coordinates to pixel coordinates
    points = [(int(x * width), int(y * height)) for x, y in pts[:, :2]]

    for start, end in HAND_CONNECTIONS:
        cv2.line(frame, points[start], points[end], (255, 255, 255), 2)

    for i, (px, py) in enumerate(points):
        cv2.circle(frame, (px, py), 3, (0, 255, 0), -1)
        cv2.putText(frame, str(i), (px + 5, py - 5), cv2.FONT_HERSHEY_SIMPLEX, 0.3, (255, 255, 255), 1)

    return frame
