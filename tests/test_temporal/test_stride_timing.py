import numpy as np
import pandas as pd
import pytest

from footstride.temporal import get_stride_timing, stride_list_as_array


@pytest.fixture
def hs_stride_list():
    return pd.DataFrame({"rhs": [0, 100, 200], "lhs": [40, 140, 240], "end": [99, 199, 299]})


@pytest.fixture
def hs_to_stride_list():
    return pd.DataFrame(
        {
            "rhs": [0, 100, 200],
            "lto": [10, 110, 210],
            "lhs": [50, 150, 250],
            "rto": [60, 160, 260],
            "end": [99, 199, 299],
        }
    )


class TestStrideListAsArray:
    def test_hs(self, hs_stride_list):
        array = stride_list_as_array(hs_stride_list)

        assert array.shape == (3, 3)
        np.testing.assert_array_equal(array[:, 0], [0, 40, 99])

    def test_hs_to(self, hs_to_stride_list):
        array = stride_list_as_array(hs_to_stride_list)

        assert array.shape == (5, 3)
        np.testing.assert_array_equal(array[:, 1], [100, 110, 150, 160, 199])

    def test_invalid_columns(self, hs_stride_list):
        with pytest.raises(ValueError):
            stride_list_as_array(hs_stride_list[["lhs", "rhs", "end"]])


class TestGetStrideTiming:
    def test_hs_from_data(self, hs_stride_list):
        timing = get_stride_timing(hs_stride_list)

        assert timing.new_length == 100
        assert timing.normalized_event_indices.to_dict() == {"rhs": 0, "lhs": 40, "end": 99}
        assert timing.phase_lengths.to_dict() == {"first_step": 40, "second_step": 60}

    def test_hs_new_length(self, hs_stride_list):
        timing = get_stride_timing(hs_stride_list, new_length=200)

        assert timing.normalized_event_indices.to_dict() == {"rhs": 0, "lhs": 80, "end": 199}

    def test_hs_event_timings(self, hs_stride_list):
        timing = get_stride_timing(hs_stride_list, event_timings_percent=50)

        assert timing.normalized_event_indices.to_dict() == {"rhs": 0, "lhs": 50, "end": 99}

    def test_hs_to_from_data(self, hs_to_stride_list):
        timing = get_stride_timing(hs_to_stride_list)

        assert timing.normalized_event_indices.to_dict() == {"rhs": 0, "lto": 10, "lhs": 50, "rto": 60, "end": 99}
        assert timing.phase_lengths.sum() == timing.new_length

    def test_hs_to_event_timings(self, hs_to_stride_list):
        timing = get_stride_timing(hs_to_stride_list, event_timings_percent=[10, 50, 60])

        assert timing.normalized_event_indices.to_dict() == {"rhs": 0, "lto": 9, "lhs": 50, "rto": 59, "end": 99}

    @pytest.mark.parametrize("timings", [[10, 50], 50])
    def test_hs_to_wrong_number_of_timings(self, hs_to_stride_list, timings):
        with pytest.raises(ValueError):
            get_stride_timing(hs_to_stride_list, event_timings_percent=timings)

    def test_hs_wrong_number_of_timings(self, hs_stride_list):
        with pytest.raises(ValueError):
            get_stride_timing(hs_stride_list, event_timings_percent=[10, 50, 60])

    @pytest.mark.parametrize("end, expected", [([100, 200, 300], 102), ([99, 200, 300], 100)])
    def test_average_length_is_even(self, hs_stride_list, end, expected):
        # Average lengths of 101 and 100.67 samples
        timing = get_stride_timing(hs_stride_list.assign(end=end))

        assert timing.new_length == expected

    def test_empty_raises(self, hs_stride_list):
        with pytest.raises(ValueError):
            get_stride_timing(hs_stride_list.iloc[:0])
