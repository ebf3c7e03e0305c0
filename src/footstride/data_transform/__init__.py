"""Filter and Data Transformation with a familiar algorithm interface."""

from footstride.data_transform._detrend import Detrend
from footstride.data_transform._filter import ButterworthFilter
from footstride.data_transform._moving_average import MovingAverageFilter
from footstride.data_transform._utils import chain_transformers
from footstride.data_transform.base import IdentityFilter

__all__ = ["ButterworthFilter", "Detrend", "IdentityFilter", "MovingAverageFilter", "chain_transformers"]
