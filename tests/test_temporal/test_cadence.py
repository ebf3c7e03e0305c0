import numpy as np
import pandas as pd
import pytest

from footstride.temporal import calculate_cadence, calculate_half_cycle_durations


@pytest.fixture
def stride_list():
    return pd.DataFrame(
        {"rhs": [0, 100, 250], "lhs": [50, 150, 300], "end": [99, 249, 349]},
        index=pd.Index([3, 5, 8], name="stride_id"),
    )


def test_half_cycle_durations(stride_list):
    durations = calculate_half_cycle_durations(stride_list, sampling_rate_hz=100)

    np.testing.assert_allclose(durations["first_step_s"], [0.5, 0.5, 0.5])
    np.testing.assert_allclose(durations["second_step_s"], [0.5, 1.0, 0.5])
    assert durations.index.equals(stride_list.index)


def test_cadence(stride_list):
    cadence = calculate_cadence(stride_list, sampling_rate_hz=100)

    assert cadence.name == "cadence_spm"
    assert cadence.index.equals(stride_list.index)
    np.testing.assert_allclose(cadence, [120, 80, 120])


def test_cadence_with_toe_offs(stride_list):
    with_to = stride_list.assign(lto=stride_list["rhs"] + 10, rto=stride_list["lhs"] + 10)

    pd.testing.assert_series_equal(
        calculate_cadence(with_to, sampling_rate_hz=100), calculate_cadence(stride_list, sampling_rate_hz=100)
    )


def test_empty_stride_list(stride_list):
    cadence = calculate_cadence(stride_list.iloc[:0], sampling_rate_hz=100)

    assert len(cadence) == 0
    assert cadence.name == "cadence_spm"


def test_missing_columns_raise(stride_list):
    with pytest.raises(ValueError):
        calculate_cadence(stride_list.drop(columns="lhs"), sampling_rate_hz=100)
