import numpy as np
import pandas as pd
import pytest
from tpcp.testing import TestAlgorithmMixin

from footstride.stride_selection import BadStrideFilter


def _stride_list(durations, first_step_ratios=None):
    durations = np.asarray(durations)
    if first_step_ratios is None:
        first_step_ratios = np.full(len(durations), 0.5)
    rhs = np.concatenate([[100], 100 + np.cumsum(durations)[:-1]])
    return pd.DataFrame(
        {
            "rhs": rhs,
            "lhs": rhs + (durations * np.asarray(first_step_ratios)).astype("int64"),
            "end": rhs + durations - 1,
        }
    ).rename_axis(index="stride_id")


@pytest.fixture
def stride_list_with_outlier():
    durations = [100] * 10
    durations[4] = 300
    return _stride_list(durations)


class TestMetaBadStrideFilter(TestAlgorithmMixin):
    __test__ = True

    ALGORITHM_CLASS = BadStrideFilter

    @pytest.fixture
    def after_action_instance(self, stride_list_with_outlier):
        return self.ALGORITHM_CLASS().filter(stride_list_with_outlier)


class TestBadStrideFilter:
    def test_long_stride_is_removed(self, stride_list_with_outlier):
        result = BadStrideFilter(max_deviation_percent=50, mode="stride_length").filter(stride_list_with_outlier)

        assert result.n_removed_strides_ == 1
        assert list(result.excluded_stride_list_.index) == [4]
        pd.testing.assert_frame_equal(result.filtered_stride_list_, stride_list_with_outlier.drop(index=4))

    def test_none_is_noop(self, stride_list_with_outlier):
        filtered = BadStrideFilter(mode="stride_length").filter(stride_list_with_outlier).filtered_stride_list_

        result = BadStrideFilter(mode="none").filter(filtered)

        assert result.n_removed_strides_ == 0
        pd.testing.assert_frame_equal(result.filtered_stride_list_, filtered)

    def test_none_keeps_outliers(self, stride_list_with_outlier):
        result = BadStrideFilter(mode="none").filter(stride_list_with_outlier)

        assert result.n_removed_strides_ == 0
        assert len(result.excluded_stride_list_) == 0

    def test_short_stride_is_removed(self):
        durations = [100] * 10
        durations[7] = 30

        result = BadStrideFilter(max_deviation_percent=50).filter(_stride_list(durations))

        assert list(result.excluded_stride_list_.index) == [7]

    def test_gait_events_checks_sub_phases(self):
        ratios = [0.5] * 10
        ratios[2] = 0.1
        stride_list = _stride_list([100] * 10, ratios)

        by_events = BadStrideFilter(mode="gait_events").filter(stride_list)
        by_length = BadStrideFilter(mode="stride_length").filter(stride_list)

        assert list(by_events.excluded_stride_list_.index) == [2]
        assert by_length.n_removed_strides_ == 0

    def test_gait_events_with_toe_offs(self):
        stride_list = pd.DataFrame(
            {
                "rhs": [0, 100, 200, 300, 400],
                "lto": [10, 110, 260, 310, 410],
                "lhs": [50, 150, 270, 350, 450],
                "rto": [60, 160, 280, 360, 460],
                "end": [99, 199, 299, 399, 499],
            }
        )

        result = BadStrideFilter(mode="gait_events").filter(stride_list)

        assert list(result.excluded_stride_list_.index) == [2]

    def test_empty_stride_list(self):
        stride_list = _stride_list([100]).iloc[:0]

        result = BadStrideFilter().filter(stride_list)

        assert result.n_removed_strides_ == 0
        assert len(result.filtered_stride_list_) == 0

    def test_invalid_mode_raises(self, stride_list_with_outlier):
        with pytest.raises(ValueError):
            BadStrideFilter(mode="invalid").filter(stride_list_with_outlier)

    def test_negative_deviation_raises(self, stride_list_with_outlier):
        with pytest.raises(ValueError):
            BadStrideFilter(max_deviation_percent=-1).filter(stride_list_with_outlier)
