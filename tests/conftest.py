import numpy as np
import pandas as pd
import pytest

from footstride.consts import SF_SENSOR_COLS
from footstride.data import make_synthetic_walking


@pytest.fixture()
def synthetic_walking():
    return make_synthetic_walking(n_strides=20)


@pytest.fixture()
def noisy_synthetic_walking():
    return make_synthetic_walking(n_strides=20, noise_std=2.0, random_state=1)


@pytest.fixture()
def zeros_imu():
    return pd.DataFrame(np.zeros((1000, 6)), columns=SF_SENSOR_COLS)
