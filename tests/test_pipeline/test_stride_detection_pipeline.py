import numpy as np
import pandas as pd
import pytest
from tpcp.testing import TestAlgorithmMixin

from footstride.consts import HS_STRIDE_COLS, HS_TO_STRIDE_COLS
from footstride.data_transform import IdentityFilter
from footstride.events import HsGyMin, HsGyZero, HsNetAcc, ToGyZero, ToNetAcc
from footstride.exceptions import ConfigurationError, DataQualityError
from footstride.pipeline import GenericStrideDetectionPipeline, StrideDetectionPipeline


def _run(pipeline, walking):
    return pipeline.detect(walking.right_imu, walking.left_imu, sampling_rate_hz=walking.sampling_rate_hz)


class TestMetaGenericStrideDetectionPipeline(TestAlgorithmMixin):
    __test__ = True

    ALGORITHM_CLASS = GenericStrideDetectionPipeline
    ONLY_DEFAULT_PARAMS = False

    @pytest.fixture
    def after_action_instance(self, synthetic_walking):
        return _run(self.ALGORITHM_CLASS(**self.ALGORITHM_CLASS.PredefinedParameters.hs_and_to), synthetic_walking)


class TestMetaStrideDetectionPipeline(TestAlgorithmMixin):
    __test__ = True

    ALGORITHM_CLASS = StrideDetectionPipeline

    @pytest.fixture
    def after_action_instance(self, synthetic_walking):
        return _run(self.ALGORITHM_CLASS(), synthetic_walking)


class TestStrideDetectionPipeline:
    def test_default_detection(self, synthetic_walking):
        pipe = _run(StrideDetectionPipeline(), synthetic_walking)

        stride_list = pipe.stride_list_
        assert tuple(stride_list.columns) == HS_STRIDE_COLS
        assert len(stride_list) == 19
        assert np.all(np.diff(stride_list.to_numpy(), axis=1) > 0)
        assert pipe.n_removed_strides_ == 0
        assert pipe.to_detection_ is None
        # 1.1 s strides with two equal steps
        np.testing.assert_allclose(pipe.cadence_per_stride_, 60 / 0.55, rtol=0.03)
        assert pipe.cadence_per_stride_.index.equals(stride_list.index)

    def test_hs_and_to_detection(self, synthetic_walking):
        pipe = _run(
            StrideDetectionPipeline(**StrideDetectionPipeline.PredefinedParameters.hs_and_to), synthetic_walking
        )

        stride_list = pipe.stride_list_
        reference = synthetic_walking.reference_stride_list("HS&TO")
        assert tuple(stride_list.columns) == HS_TO_STRIDE_COLS
        assert len(stride_list) == 19
        assert np.all(np.diff(stride_list.to_numpy(), axis=1) > 0)
        assert np.all(np.abs(stride_list.to_numpy() - reference.to_numpy()) <= 3)

    def test_edge_buffer(self, synthetic_walking):
        pipe = _run(StrideDetectionPipeline(edge_buffer_s=2.0), synthetic_walking)

        n_samples = len(synthetic_walking.right_imu)
        assert pipe.n_trimmed_strides_ > 0
        assert pipe.n_removed_strides_ == pipe.n_trimmed_strides_
        assert len(pipe.stride_list_) == 19 - pipe.n_trimmed_strides_
        assert np.all(pipe.stride_list_.to_numpy() >= 200)
        assert np.all(pipe.stride_list_.to_numpy() <= n_samples - 200)

    def test_removed_strides_are_counted(self, synthetic_walking):
        pipe = _run(
            StrideDetectionPipeline(hs_detection=HsGyZero(max_search_s=0.05), edge_buffer_s=2.0), synthetic_walking
        )

        assert len(pipe.stride_list_) == 0
        assert pipe.n_removed_strides_ == (
            pipe.n_failed_strides_ + pipe.bad_stride_filter_.n_removed_strides_ + pipe.n_trimmed_strides_
        )
        assert pipe.n_failed_strides_ == 19

    def test_noisy_data(self, noisy_synthetic_walking):
        pipe = _run(StrideDetectionPipeline(), noisy_synthetic_walking)

        assert len(pipe.stride_list_) == 19

    def test_without_pre_filter(self, synthetic_walking):
        pipe = _run(StrideDetectionPipeline(pre_filter=IdentityFilter()), synthetic_walking)

        assert len(pipe.stride_list_) == 19

    def test_array_input(self, synthetic_walking):
        from_df = _run(StrideDetectionPipeline(), synthetic_walking).stride_list_
        from_array = (
            StrideDetectionPipeline()
            .detect(
                synthetic_walking.right_imu.to_numpy(),
                synthetic_walking.left_imu.to_numpy(),
                sampling_rate_hz=synthetic_walking.sampling_rate_hz,
            )
            .stride_list_
        )

        pd.testing.assert_frame_equal(from_df, from_array)

    def test_input_not_modified(self, synthetic_walking):
        right_imu = synthetic_walking.right_imu.copy()
        left_imu = synthetic_walking.left_imu.copy()

        _run(StrideDetectionPipeline(), synthetic_walking)

        pd.testing.assert_frame_equal(synthetic_walking.right_imu, right_imu)
        pd.testing.assert_frame_equal(synthetic_walking.left_imu, left_imu)

    def test_nested_algorithms_are_not_modified(self, synthetic_walking):
        pipe = _run(StrideDetectionPipeline(), synthetic_walking)

        assert not hasattr(pipe.hs_detection, "hs_list_")
        assert hasattr(pipe.hs_detection_, "hs_list_")

    def test_no_data_raises(self, zeros_imu):
        with pytest.raises(DataQualityError):
            StrideDetectionPipeline().detect(zeros_imu, zeros_imu, sampling_rate_hz=100.0)

    def test_unequal_length_raises(self, synthetic_walking):
        with pytest.raises(ValueError):
            StrideDetectionPipeline().detect(
                synthetic_walking.right_imu,
                synthetic_walking.left_imu.iloc[:-10],
                sampling_rate_hz=synthetic_walking.sampling_rate_hz,
            )

    @pytest.mark.parametrize(
        "paras",
        [
            {"hs_detection": ToGyZero()},
            {"to_detection": HsGyZero()},
            {"pre_filter": HsGyZero()},
            {"bad_stride_filter": IdentityFilter()},
            {"edge_buffer_s": -1.0},
        ],
    )
    def test_invalid_algorithms_raise(self, synthetic_walking, paras):
        with pytest.raises(ConfigurationError):
            _run(StrideDetectionPipeline(**paras), synthetic_walking)


class TestFromConfig:
    def test_defaults(self):
        pipe = StrideDetectionPipeline.from_config({})

        assert isinstance(pipe, StrideDetectionPipeline)
        assert isinstance(pipe.hs_detection, HsGyZero)
        assert pipe.to_detection is None
        assert pipe.bad_stride_filter.mode == "stride_length"
        assert pipe.bad_stride_filter.max_deviation_percent == 50.0
        assert pipe.edge_buffer_s == 0.0

    def test_full_config(self):
        pipe = StrideDetectionPipeline.from_config(
            {
                "hs_method": "NetAcc",
                "to_method": "NetAcc",
                "events": "HS&TO",
                "min_peak_height": 30,
                "min_peak_prominence": 80,
                "buffer_s": 1,
                "bad_stride_cutoff_pct": 40,
                "bad_stride_mode": "gaitEvents",
            }
        )

        assert isinstance(pipe.hs_detection, HsNetAcc)
        assert isinstance(pipe.to_detection, ToNetAcc)
        assert pipe.hs_detection.min_peak_height_dps == 30.0
        assert pipe.hs_detection.min_peak_prominence_dps == 80.0
        assert pipe.edge_buffer_s == 1.0
        assert pipe.bad_stride_filter.max_deviation_percent == 40.0
        assert pipe.bad_stride_filter.mode == "gait_events"

    def test_to_method_ignored_for_hs_only(self):
        pipe = StrideDetectionPipeline.from_config({"to_method": "GYmin"})

        assert pipe.to_detection is None

    def test_config_pipeline_detects(self, synthetic_walking):
        pipe = StrideDetectionPipeline.from_config({"hs_method": "GYmin", "to_method": "GYzero", "events": "HS&TO"})

        pipe = _run(pipe, synthetic_walking)

        assert isinstance(pipe.hs_detection_, HsGyMin)
        assert tuple(pipe.stride_list_.columns) == HS_TO_STRIDE_COLS
        assert len(pipe.stride_list_) == 19

    @pytest.mark.parametrize(
        "config",
        [
            {"hs_method": "GYmax"},
            {"events": "TO"},
            {"events": "HS&TO"},
            {"events": "HS&TO", "to_method": "unknown"},
            {"to_method": "unknown"},
            {"bad_stride_mode": "length"},
            {"buffer_s": -1},
            {"buffer_s": True},
            {"min_peak_height": "50"},
            {"unknown_key": 1},
        ],
    )
    def test_invalid_config_raises(self, config):
        with pytest.raises(ConfigurationError):
            StrideDetectionPipeline.from_config(config)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            StrideDetectionPipeline.from_config({"hs_method": "GYmax"})
