"""Heel strike and toe off detection from two foot mounted IMUs for stride segmentation."""

__version__ = "0.1.0"
