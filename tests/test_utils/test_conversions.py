import numpy as np
import pytest

from footstride.utils.conversions import as_samples


class TestAsSamples:
    @pytest.mark.parametrize("seconds, sampling_rate, expected", [(1, 100, 100), (0.05, 100, 5), (0.024, 100, 2)])
    def test_scalar(self, seconds, sampling_rate, expected):
        result = as_samples(seconds, sampling_rate)

        assert result == expected
        assert isinstance(result, int)

    def test_array(self):
        result = as_samples(np.array([0.1, 0.26, 1.0]), 50)

        np.testing.assert_array_equal(result, [5, 13, 50])
        assert result.dtype == np.int64
