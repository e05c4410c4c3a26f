"""
Test cases for the sequence buffer and prediction smoother.
"""
import unittest

import numpy as np

from gesture_recognition.buffers import SequenceBuffer
from gesture_recognition.errors import InvalidInputShape
from gesture_recognition.smoothing import PredictionSmoother


def frame(value: float) -> np.ndarray:
    """Frame of 63 identical values, easy to identify in a sequence."""
    return np.full(63, value, dtype=np.float32)


class TestSequenceBuffer(unittest.TestCase):
    """Test the rolling window of normalized frames."""

    def setUp(self):
        self.buffer = SequenceBuffer(sequence_length=15)

    def test_not_ready_until_full(self):
        """get_sequence returns None while warming up."""
        for i in range(14):
            self.buffer.add(frame(i))
            self.assertIsNone(self.buffer.get_sequence())
            self.assertFalse(self.buffer.is_full())
        self.buffer.add(frame(14))
        self.assertTrue(self.buffer.is_full())
        self.assertEqual(self.buffer.get_sequence().shape, (15, 63))

    def test_sliding_window_keeps_last_frames(self):
        """After N + k adds the buffer holds the last N frames, oldest first."""
        for k in (0, 1, 7, 30):
            buffer = SequenceBuffer(sequence_length=15)
            for i in range(15 + k):
                buffer.add(frame(i))
            self.assertEqual(buffer.size(), 15)
            seq = buffer.get_sequence()
            np.testing.assert_array_equal(seq[:, 0], np.arange(k, 15 + k, dtype=np.float32))

    def test_progress(self):
        """Progress is size / N."""
        self.assertEqual(self.buffer.progress, 0.0)
        for i in range(5):
            self.buffer.add(frame(i))
        self.assertAlmostEqual(self.buffer.progress, 5 / 15)
        self.assertEqual(len(self.buffer), 5)

    def test_clear(self):
        """clear empties the buffer."""
        for i in range(15):
            self.buffer.add(frame(i))
        self.buffer.clear()
        self.assertEqual(self.buffer.size(), 0)
        self.assertIsNone(self.buffer.get_sequence())

    def test_rejects_wrong_feature_count(self):
        """Frames must have num_features values."""
        with self.assertRaises(InvalidInputShape):
            self.buffer.add(np.zeros(62))

    def test_sequence_is_a_copy(self):
        """Mutating the returned matrix does not change the buffer."""
        for i in range(15):
            self.buffer.add(frame(i))
        seq = self.buffer.get_sequence()
        seq[:] = -1
        self.assertEqual(float(self.buffer.get_sequence()[0, 0]), 0.0)

    def test_invalid_length(self):
        with self.assertRaises(ValueError):
            SequenceBuffer(sequence_length=0)


class TestPredictionSmoother(unittest.TestCase):
    """Test majority-vote smoothing."""

    def setUp(self):
        self.smoother = PredictionSmoother(window_size=5, stability_threshold=0.6, min_samples=3)

    def test_empty(self):
        """No history means no prediction and not stable."""
        self.assertIsNone(self.smoother.get_smoothed_prediction())
        self.assertFalse(self.smoother.is_stable())

    def test_identical_predictions_are_stable(self):
        """M identical indices give that index and a stable flag."""
        for _ in range(5):
            self.smoother.add_prediction(2)
        self.assertEqual(self.smoother.get_smoothed_prediction(), 2)
        self.assertTrue(self.smoother.is_stable())

    def test_round_robin_is_unstable(self):
        """M distinct classes with no majority is not stable."""
        for idx in range(5):
            self.smoother.add_prediction(idx)
        self.assertFalse(self.smoother.is_stable())

    def test_majority_vote(self):
        """The most frequent class wins over a single flicker."""
        for idx in (1, 1, 4, 1, 1):
            self.smoother.add_prediction(idx)
        self.assertEqual(self.smoother.get_smoothed_prediction(), 1)
        self.assertTrue(self.smoother.is_stable())

    def test_tie_goes_to_most_recent(self):
        """Among equally frequent classes the one seen last wins."""
        for idx in (0, 3, 0, 3):
            self.smoother.add_prediction(idx)
        self.assertEqual(self.smoother.get_smoothed_prediction(), 3)
        self.smoother.add_prediction(1)
        self.smoother.add_prediction(0)
        # window [3, 0, 3, 1, 0]: 3 and 0 tie, 0 is latest
        self.assertEqual(self.smoother.get_smoothed_prediction(), 0)

    def test_window_eviction(self):
        """Only the last window_size predictions vote."""
        for _ in range(5):
            self.smoother.add_prediction(0)
        for _ in range(3):
            self.smoother.add_prediction(4)
        self.assertEqual(len(self.smoother), 5)
        self.assertEqual(self.smoother.get_smoothed_prediction(), 4)

    def test_min_samples(self):
        """Too few samples is never stable."""
        self.smoother.add_prediction(1)
        self.smoother.add_prediction(1)
        self.assertEqual(self.smoother.get_smoothed_prediction(), 1)
        self.assertFalse(self.smoother.is_stable())
        self.smoother.add_prediction(1)
        self.assertTrue(self.smoother.is_stable())

    def test_threshold_boundary(self):
        """Stability needs the mode to reach the threshold fraction."""
        for idx in (1, 1, 1, 2, 3):  # 3/5 = 0.6
            self.smoother.add_prediction(idx)
        self.assertTrue(self.smoother.is_stable())
        self.smoother.add_prediction(4)  # [1, 1, 2, 3, 4] -> 2/5
        self.assertFalse(self.smoother.is_stable())

    def test_clear(self):
        for _ in range(5):
            self.smoother.add_prediction(2)
        self.smoother.clear()
        self.assertIsNone(self.smoother.get_smoothed_prediction())
        self.assertFalse(self.smoother.is_stable())

    def test_invalid_settings(self):
        with self.assertRaises(ValueError):
            PredictionSmoother(window_size=0)
        with self.assertRaises(ValueError):
            PredictionSmoother(stability_threshold=1.5)


if __name__ == '__main__':
    unittest.main()
