"""
ONNX Runtime sequence classifier.
"""
import logging
from pathlib import Path
from typing import List, Optional

import numpy as np
import onnxruntime as ort

from .errors import ClassifierUnavailable, RecognizerInitError

logger = logging.getLogger(__name__)


class OnnxSequenceClassifier:
    """
    Runs a temporal gesture model exported to ONNX.

    The model takes a float32 tensor of shape [1, sequence_length, num_features]
    and returns per-class probabilities as its first output.
    """

    def __init__(self, model_path: str, labels: List[str], sequence_length: int = 15, num_features: int = 63):
        """
        Load the model.

        Raises:
            RecognizerInitError: if the model file is missing or cannot be loaded
        """
        path = Path(model_path)
        if not path.exists():
            raise RecognizerInitError(f"ONNX model not found: {path}")

        self.labels = list(labels)
        self.sequence_length = sequence_length
        self.num_features = num_features

        try:
            self.session = ort.InferenceSession(str(path), providers=["CPUExecutionProvider"])
        except Exception as e:
            raise RecognizerInitError(f"Failed to load ONNX model: {e}") from e

        self.input_name = self.session.get_inputs()[0].name
        self.output_name = self.session.get_outputs()[0].name
        logger.info(
            f"ONNX session created: {path.name} "
            f"(input={self.input_name} {self.session.get_inputs()[0].shape}, output={self.output_name})"
        )

    def predict(self, sequence: np.ndarray) -> Optional[np.ndarray]:
        """
        Classify one window.

        Args:
            sequence: (sequence_length, num_features) matrix, oldest frame first

        Returns:
            Probability vector of length len(labels)

        Raises:
            ClassifierUnavailable: if the window has the wrong shape or inference fails
        """
        seq = np.asarray(sequence, dtype=np.float32)
        expected = self.sequence_length * self.num_features
        if seq.size != expected:
            raise ClassifierUnavailable(f"Expected {expected} features, got {seq.size}")
        batch = seq.reshape(1, self.sequence_length, self.num_features)

        try:
            outputs = self.session.run([self.output_name], {self.input_name: batch})
        except Exception as e:
            logger.error(f"Inference failed: {e}")
            raise ClassifierUnavailable(str(e)) from e

        return np.asarray(outputs[0], dtype=np.float32).reshape(-1)

    def close(self) -> None:
        # InferenceSession has no explicit close; dropping the reference frees it
        self.session = None
        logger.info("ONNX session closed")
