"""Example data for footstride."""

from footstride.data._synthetic import SyntheticWalking, make_synthetic_walking

__all__ = ["SyntheticWalking", "make_synthetic_walking"]
