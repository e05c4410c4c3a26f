"""
Exceptions raised by the gesture recognition pipeline.
"""


class GestureRecognitionError(Exception):
    """Base class for all pipeline errors."""


class InvalidInputShape(GestureRecognitionError, ValueError):
    """A landmark frame did not contain the expected number of values."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} features, got {actual}")


class UnsupportedRotation(GestureRecognitionError, ValueError):
    """Rotation metadata outside of 0/90/180/270 degrees."""

    def __init__(self, rotation):
        self.rotation = rotation
        super().__init__(f"Unsupported rotation: {rotation} (expected 0, 90, 180 or 270)")


class ClassifierUnavailable(GestureRecognitionError):
    """The sequence classifier could not produce a prediction for this frame."""


class DetectorUnavailable(GestureRecognitionError):
    """The hand detector could not process this frame."""


class RecognizerInitError(GestureRecognitionError, RuntimeError):
    """A collaborator failed to initialize; the recognizer cannot be used."""
