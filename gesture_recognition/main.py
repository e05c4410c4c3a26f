"""
Main application for temporal hand gesture recognition.
"""
import argparse
import logging
import threading
import time
from queue import Queue, Empty, Full
from typing import Optional

import cv2
import numpy as np

from .classifier import OnnxSequenceClassifier
from .config import load_config, Cfg
from .landmarks import HandsTracker, draw_landmarks
from .recognizer import GestureRecognizer
from .transform import validate_rotation
from .types import GestureResult, ResultStatus, format_label

logger = logging.getLogger(__name__)

# Latest frame only; the capture thread overwrites when full
FRAME_QUEUE_MAX = 1


def capture_loop(cap: cv2.VideoCapture, frame_queue: Queue, stop_event: threading.Event) -> None:
    """Read camera frames and keep only the newest one in ``frame_queue``."""
    logger.info("Capture thread started")
    while not stop_event.is_set():
        ok, frame = cap.read()
        if not ok:
            time.sleep(0.01)
            continue

        if frame_queue.full():
            try:
                frame_queue.get_nowait()  # drop older frame
            except Empty:
                pass
        try:
            frame_queue.put_nowait(frame)
        except Full:
            pass
    logger.info("Capture thread exiting")


class GestureRecognitionApp:
    """Main application class for hand gesture recognition."""

    def __init__(self, config: Cfg, model_path: Optional[str] = None):
        """Initialize the application with a loaded configuration."""
        self.config = config
        if model_path is not None:
            self.config.classifier.model_path = model_path

        # reject bad rotation config at startup
        self.rotation = validate_rotation(self.config.camera.rotation, strict=True)
        self.mirror = self.config.camera.mirror

        detector = HandsTracker(
            max_num_hands=self.config.mediapipe.max_num_hands,
            min_detection_conf=self.config.mediapipe.min_detection_confidence,
            min_tracking_conf=self.config.mediapipe.min_tracking_confidence
        )
        classifier = OnnxSequenceClassifier(
            self.config.classifier.model_path,
            self.config.classifier.labels,
            sequence_length=self.config.recognizer.sequence_length,
            num_features=self.config.recognizer.num_features
        )
        self.recognizer = GestureRecognizer.from_config(self.config, detector, classifier)

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            self.recognizer.close()
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

        self.frame_queue: Queue = Queue(maxsize=FRAME_QUEUE_MAX)
        self.stop_event = threading.Event()
        self.fps = 0.0

    def run(self) -> None:
        """Run the recognition loop until 'q' is pressed or the camera stops."""
        logger.info(f"Starting {self.config.display.window_name}")
        print("Press 'q' to quit, 'r' to reset")

        capture = threading.Thread(
            target=capture_loop,
            args=(self.cap, self.frame_queue, self.stop_event),
            daemon=True
        )
        capture.start()

        last_time = time.time()
        try:
            while not self.stop_event.is_set():
                try:
                    frame = self.frame_queue.get(timeout=1.0)
                except Empty:
                    logger.warning("No frame received from camera")
                    continue

                # This loop is the only caller of process_frame
                result = self.recognizer.process_frame(frame, rotation=self.rotation, mirror=self.mirror)

                now = time.time()
                if now > last_time:
                    self.fps = 0.9 * self.fps + 0.1 * (1.0 / (now - last_time))
                last_time = now

                display = self._display_frame(frame)
                self._draw_overlay(display, result)
                cv2.imshow(self.config.display.window_name, display)

                key = cv2.waitKey(1) & 0xFF
                if key == ord('q'):
                    break
                if key == ord('r'):
                    self.recognizer.reset()
        finally:
            self.stop_event.set()
            capture.join(timeout=2.0)
            self.cap.release()
            self.recognizer.close()
            cv2.destroyAllWindows()

    def _display_frame(self, frame: np.ndarray) -> np.ndarray:
        """Rotate and mirror the camera image the same way landmarks are transformed."""
        display = frame
        if self.rotation == 90:
            display = cv2.rotate(display, cv2.ROTATE_90_CLOCKWISE)
        elif self.rotation == 180:
            display = cv2.rotate(display, cv2.ROTATE_180)
        elif self.rotation == 270:
            display = cv2.rotate(display, cv2.ROTATE_90_COUNTERCLOCKWISE)
        if self.mirror:
            display = cv2.flip(display, 1)
        return np.ascontiguousarray(display)

    def _draw_overlay(self, frame: np.ndarray, result: GestureResult) -> None:
        """Draw skeleton, status, confidence and per-class probabilities."""
        height = frame.shape[0]
        threshold = self.config.classifier.confidence_threshold

        landmarks = self.recognizer.last_landmarks
        if landmarks is not None and self.config.display.show_landmarks:
            draw_landmarks(frame, landmarks)

        if result.meets_threshold(threshold):
            if result.confidence > 0.8:
                color = (0, 255, 0)
            elif result.confidence > 0.6:
                color = (0, 255, 255)
            else:
                color = (0, 165, 255)
            text = f"{result.display_text} {result.confidence * 100:.1f}%"
            status = "Stable" if result.is_stable else "Processing..."
        elif result.status == ResultStatus.COLLECTING:
            color = (200, 200, 200)
            text = f"{result.display_text} {int(result.buffer_progress * 100)}%"
            status = "Hold your hand in view"
        elif result.status == ResultStatus.PREDICTED:
            color = (200, 200, 200)
            text = f"Low confidence {result.confidence * 100:.1f}%"
            status = "Move hand clearly"
        else:
            color = (128, 128, 128)
            text = result.display_text
            status = "Waiting for hand..."

        cv2.putText(frame, text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.8, color, 2)
        cv2.putText(frame, status, (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1)
        cv2.putText(frame, f"Buffer: {self.recognizer.buffer_size}/{self.config.recognizer.sequence_length}",
                    (10, 85), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, f"FPS: {self.fps:.1f}", (10, 105), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

        if self.config.display.show_probabilities and result.status == ResultStatus.PREDICTED:
            for i, (label, prob) in enumerate(zip(self.recognizer.labels, result.probabilities)):
                y = 135 + i * 20
                bar = int(150 * float(prob))
                cv2.rectangle(frame, (10, y - 12), (10 + bar, y + 2), (0, 200, 0), -1)
                cv2.putText(frame, f"{format_label(label)} {prob * 100:.0f}%", (170, y),
                            cv2.FONT_HERSHEY_SIMPLEX, 0.45, (255, 255, 255), 1)

        cv2.putText(frame, "Press 'q' to quit, 'r' to reset", (10, height - 20),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)


def setup_logging(cfg: Cfg) -> None:
    logging.basicConfig(
        level=getattr(logging, cfg.logging.level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def run() -> None:
    """Entry point for the application."""
    parser = argparse.ArgumentParser(description="Temporal hand gesture recognition")
    parser.add_argument("--config", help="Path to YAML config (default: packaged config.default.yaml)")
    parser.add_argument("--model", help="Path to ONNX gesture model (overrides config)")
    args = parser.parse_args()

    config = load_config(args.config)
    setup_logging(config)

    try:
        app = GestureRecognitionApp(config, model_path=args.model)
        app.run()
    except KeyboardInterrupt:
        print("\nApplication interrupted by user")
    except Exception as e:
        logger.error(f"Error: {e}")
        raise


if __name__ == "__main__":
    run()
