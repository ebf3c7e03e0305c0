import numpy as np
import pytest

from footstride.events import remove_double_steps


def _merged_feet(right_idx, left_idx):
    merged = sorted([(i, "right") for i in right_idx] + [(i, "left") for i in left_idx])
    return [foot for _, foot in merged]


class TestRemoveDoubleSteps:
    def test_alternating_is_unchanged(self):
        right = np.array([10, 30, 50])
        left = np.array([20, 40, 60])

        new_right, new_left = remove_double_steps(right, np.ones(3), left, np.ones(3))

        np.testing.assert_array_equal(new_right, right)
        np.testing.assert_array_equal(new_left, left)

    def test_smaller_peak_is_removed(self):
        new_right, new_left = remove_double_steps(
            np.array([10, 15, 30]), np.array([100, 200, 100]), np.array([20, 40]), np.array([100, 100])
        )

        np.testing.assert_array_equal(new_right, [15, 30])
        np.testing.assert_array_equal(new_left, [20, 40])

    def test_tie_removes_earlier_peak(self):
        new_right, _ = remove_double_steps(
            np.array([10, 15, 30]), np.array([100, 100, 100]), np.array([20, 40]), np.array([100, 100])
        )

        np.testing.assert_array_equal(new_right, [15, 30])

    def test_double_step_of_left_foot(self):
        new_right, new_left = remove_double_steps(
            np.array([10, 30, 50]), np.array([100, 100, 100]), np.array([20, 25, 40]), np.array([150, 100, 150])
        )

        np.testing.assert_array_equal(new_right, [10, 30, 50])
        np.testing.assert_array_equal(new_left, [20, 40])

    def test_trailing_run_is_resolved(self):
        new_right, new_left = remove_double_steps(
            np.array([10, 30, 50, 55]), np.array([1, 1, 100, 200]), np.array([20, 40]), np.array([1, 1])
        )

        np.testing.assert_array_equal(new_right, [10, 30, 55])
        np.testing.assert_array_equal(new_left, [20, 40])

    def test_inputs_are_not_modified(self):
        right = np.array([10, 15, 30])
        left = np.array([20, 40])

        remove_double_steps(right, np.array([1, 2, 3]), left, np.array([1, 1]))

        np.testing.assert_array_equal(right, [10, 15, 30])
        np.testing.assert_array_equal(left, [20, 40])

    def test_empty_foot(self):
        new_right, new_left = remove_double_steps(np.array([10, 20]), np.array([1, 1]), np.array([]), np.array([]))

        np.testing.assert_array_equal(new_right, [10, 20])
        assert len(new_left) == 0

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError):
            remove_double_steps(np.array([10, 20]), np.array([1]), np.array([15]), np.array([1]))

    @pytest.mark.parametrize("seed", range(10))
    def test_random_peaks_alternate(self, seed):
        rng = np.random.default_rng(seed)
        peaks = np.sort(rng.choice(2000, size=60, replace=False))
        is_right = rng.random(60) > 0.5
        right, left = peaks[is_right], peaks[~is_right]
        right_mag, left_mag = rng.random(len(right)), rng.random(len(left))

        new_right, new_left = remove_double_steps(right, right_mag, left, left_mag)

        feet = _merged_feet(new_right, new_left)
        assert all(a != b for a, b in zip(feet[:-1], feet[1:]))
        assert set(new_right) <= set(right)
        assert set(new_left) <= set(left)

        # Idempotent
        again_right, again_left = remove_double_steps(
            new_right, right_mag[np.isin(right, new_right)], new_left, left_mag[np.isin(left, new_left)]
        )
        np.testing.assert_array_equal(again_right, new_right)
        np.testing.assert_array_equal(again_left, new_left)
