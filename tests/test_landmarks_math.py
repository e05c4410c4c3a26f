"""
Test cases for the coordinate transform and landmark normalization.
"""
import unittest

import numpy as np

from gesture_recognition.errors import InvalidInputShape, UnsupportedRotation
from gesture_recognition.mocks import synthetic_hand
from gesture_recognition.normalizer import normalize_landmarks, normalize_batch, CLIP_RANGE, MIN_SCALE
from gesture_recognition.transform import transform_point, transform_landmarks, validate_rotation


class TestTransformPoint(unittest.TestCase):
    """Test the sensor-to-display coordinate map."""

    def test_identity(self):
        """Rotation 0 without mirror leaves the point unchanged."""
        self.assertEqual(transform_point(0.2, 0.7, 0, False), (0.2, 0.7))

    def test_rotation_formulas(self):
        """Each supported rotation maps (x, y) as documented."""
        x, y = 0.2, 0.7
        np.testing.assert_allclose(transform_point(x, y, 90), (1 - y, x))
        np.testing.assert_allclose(transform_point(x, y, 180), (1 - x, 1 - y))
        np.testing.assert_allclose(transform_point(x, y, 270), (y, 1 - x))

    def test_rotation_is_bijection(self):
        """Rotating by r then by 360 - r recovers the original point."""
        rng = np.random.default_rng(1)
        for x, y in rng.uniform(0, 1, size=(20, 2)):
            for r in (90, 180, 270):
                rx, ry = transform_point(x, y, r)
                bx, by = transform_point(rx, ry, 360 - r)
                self.assertAlmostEqual(bx, x, places=9)
                self.assertAlmostEqual(by, y, places=9)

    def test_mirror_is_self_inverse(self):
        """Mirroring twice returns the original x."""
        x, y = transform_point(0.3, 0.4, 0, True)
        self.assertAlmostEqual(x, 0.7)
        x2, _ = transform_point(x, y, 0, True)
        self.assertAlmostEqual(x2, 0.3)

    def test_mirror_applied_after_rotation(self):
        """At 90 degrees the mirror flips the rotated x, not the sensor x."""
        x, y = 0.2, 0.7
        # rotate: (1 - 0.7, 0.2) = (0.3, 0.2); mirror: (0.7, 0.2)
        np.testing.assert_allclose(transform_point(x, y, 90, True), (0.7, 0.2))
        # mirroring first would give (1 - 0.7, 0.8) = (0.3, 0.8)
        self.assertNotAlmostEqual(transform_point(x, y, 90, True)[1], 0.8)

    def test_unsupported_rotation_falls_back_to_identity(self):
        """Unsupported rotations use identity and log a warning."""
        with self.assertLogs("gesture_recognition.transform", level="WARNING") as logs:
            result = transform_point(0.2, 0.7, 45)
        self.assertEqual(result, (0.2, 0.7))
        self.assertIn("Unsupported rotation 45", logs.output[0])

    def test_validate_rotation_strict(self):
        """Strict validation raises instead of falling back."""
        self.assertEqual(validate_rotation(270, strict=True), 270)
        with self.assertRaises(UnsupportedRotation):
            validate_rotation(45, strict=True)

    def test_missing_rotation_is_identity(self):
        """None means no rotation metadata and maps to 0, even when strict."""
        self.assertEqual(validate_rotation(None), 0)
        self.assertEqual(validate_rotation(None, strict=True), 0)
        self.assertEqual(transform_point(0.2, 0.7, None), (0.2, 0.7))


class TestTransformLandmarks(unittest.TestCase):
    """Test the per-hand transform."""

    def test_z_passthrough_and_shape(self):
        """Output is 63 floats and z is untouched."""
        hand = synthetic_hand(seed=3)
        out = transform_landmarks(hand, rotation=90, mirror=True)
        self.assertEqual(out.shape, (63,))
        np.testing.assert_allclose(out.reshape(21, 3)[:, 2], hand[:, 2])

    def test_matches_point_transform(self):
        """Every landmark gets the same map as transform_point."""
        hand = synthetic_hand(seed=4)
        out = transform_landmarks(hand, rotation=270).reshape(21, 3)
        for i in range(21):
            ex, ey = transform_point(float(hand[i, 0]), float(hand[i, 1]), 270)
            self.assertAlmostEqual(float(out[i, 0]), ex, places=5)
            self.assertAlmostEqual(float(out[i, 1]), ey, places=5)

    def test_unsupported_rotation_warns_once_per_frame(self):
        """A bad rotation is reported once for the whole hand."""
        with self.assertLogs("gesture_recognition.transform", level="WARNING") as logs:
            transform_landmarks(synthetic_hand(), rotation=30)
        self.assertEqual(len(logs.output), 1)

    def test_wrong_landmark_count(self):
        """Anything other than 21 landmarks is rejected."""
        with self.assertRaises(InvalidInputShape):
            transform_landmarks(np.zeros((20, 3)))


class TestNormalizer(unittest.TestCase):
    """Test landmark normalization."""

    def test_wrist_is_origin(self):
        """The wrist x, y, z are zero after normalization."""
        for seed in range(10):
            out = normalize_landmarks(synthetic_hand(seed=seed).reshape(-1))
            self.assertEqual(out[0], 0.0)
            self.assertEqual(out[1], 0.0)
            self.assertEqual(out[2], 0.0)

    def test_values_are_clipped(self):
        """All outputs stay within [-CLIP_RANGE, CLIP_RANGE]."""
        hand = synthetic_hand(seed=5)
        hand[7] = [40.0, -40.0, 100.0]  # detector outlier
        out = normalize_landmarks(hand)
        self.assertTrue(np.all(out <= CLIP_RANGE))
        self.assertTrue(np.all(out >= -CLIP_RANGE))

    def test_scale_uses_larger_bbox_side(self):
        """Coordinates are divided by max(x range, y range)."""
        hand = np.zeros((21, 3), dtype=np.float32)
        hand[:, 0] = 0.5
        hand[:, 1] = 0.5
        hand[1] = [0.6, 0.5, 0.05]  # x range 0.1
        hand[2] = [0.5, 0.9, 0.0]  # y range 0.4
        out = normalize_landmarks(hand).reshape(21, 3)
        np.testing.assert_allclose(out[1], [0.25, 0.0, 0.125], atol=1e-5)
        np.testing.assert_allclose(out[2], [0.0, 1.0, 0.0], atol=1e-5)

    def test_collapsed_hand_is_finite(self):
        """A hand collapsed to one point does not produce NaN or inf."""
        hand = np.full((21, 3), 0.5, dtype=np.float32)
        out = normalize_landmarks(hand)
        self.assertTrue(np.all(np.isfinite(out)))
        np.testing.assert_array_equal(out, np.zeros(63, dtype=np.float32))

    def test_tiny_hand_uses_scale_floor(self):
        """A hand smaller than MIN_SCALE is divided by MIN_SCALE."""
        hand = np.zeros((21, 3), dtype=np.float32)
        hand[1, 0] = MIN_SCALE / 10
        out = normalize_landmarks(hand)
        self.assertTrue(np.all(np.isfinite(out)))
        self.assertAlmostEqual(float(out[3]), 0.1, places=4)

    def test_position_and_scale_invariance(self):
        """Translating and scaling the hand gives the same features."""
        hand = synthetic_hand(seed=6)
        moved = hand.copy()
        moved[:, :2] = (hand[:, :2] - 0.5) * 0.5 + 0.2
        moved[:, 2] = hand[:, 2] * 0.5
        np.testing.assert_allclose(normalize_landmarks(hand), normalize_landmarks(moved), atol=1e-4)

    def test_invalid_shape(self):
        """Inputs without exactly 63 values raise InvalidInputShape."""
        with self.assertRaises(InvalidInputShape) as ctx:
            normalize_landmarks(np.zeros(60))
        self.assertEqual(ctx.exception.expected, 63)
        self.assertEqual(ctx.exception.actual, 60)
        self.assertIsInstance(ctx.exception, ValueError)

    def test_normalize_batch(self):
        """Batches are normalized frame by frame."""
        frames = [synthetic_hand(seed=s) for s in range(3)]
        out = normalize_batch(frames)
        self.assertEqual(len(out), 3)
        np.testing.assert_array_equal(out[1], normalize_landmarks(frames[1]))


if __name__ == '__main__':
    unittest.main()
