"""Full stride detection from the IMU data of both feet."""

from footstride.pipeline._config import BadStrideMode, EventMethod, EventSet
from footstride.pipeline._stride_detection_pipeline import GenericStrideDetectionPipeline, StrideDetectionPipeline

__all__ = ["BadStrideMode", "EventMethod", "EventSet", "GenericStrideDetectionPipeline", "StrideDetectionPipeline"]
