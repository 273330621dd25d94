"""
Tests for the measurement engine and intensity samplers
"""

import numpy as np
import pytest

from roi_engine.core.measurement import (
    ImageIntensitySampler,
    MeasurementEngine,
    RandomIntensityProxy,
)
from roi_engine.schemas import Measurements, Point


def _points(coords):
    return [Point(x=x, y=y) for x, y in coords]


class TestMeasurementEngine:
    """Length and intensity derivation"""

    def test_three_four_five_default_scale(self, measurement_engine):
        result = measurement_engine.measure(_points([(0, 0), (0, 3), (4, 0)]))

        assert result.length == 17

    def test_three_four_five_unit_scale(self):
        engine = MeasurementEngine(mm_per_unit=1.0, sampler=RandomIntensityProxy(seed=1))

        result = engine.measure(_points([(0, 0), (0, 3), (4, 0)]))

        assert result.length == 5

    def test_length_is_int(self, measurement_engine):
        result = measurement_engine.measure(_points([(0, 0), (1, 1)]))

        assert isinstance(result.length, int)
        assert result.length == 4

    def test_single_point_has_zero_length(self, measurement_engine):
        assert measurement_engine.measure(_points([(5, 5)])).length == 0

    def test_passthrough_fields_kept(self, measurement_engine):
        previous = Measurements(length=999, hu_value=42.0, width=12.5, volume=300.0, adc_value=0.8)

        result = measurement_engine.measure(_points([(0, 0), (0, 3), (4, 0)]), previous)

        assert result.length == 17
        assert result.hu_value == 42.0
        assert result.width == 12.5
        assert result.volume == 300.0
        assert result.adc_value == 0.8

    def test_does_not_mutate_previous(self, measurement_engine):
        previous = Measurements(length=1)

        measurement_engine.measure(_points([(0, 0), (10, 0)]), previous)

        assert previous.length == 1

    def test_apply_updates_roi(self, measurement_engine, roi_factory):
        roi = roi_factory([(0, 0), (0, 3), (4, 0)])

        measurement_engine.apply(roi)

        assert roi.measurements.length == 17
        assert 30 <= roi.measurements.hu_value < 90

    def test_total_burden(self, roi_factory):
        first = roi_factory([(0, 0), (1, 0)])
        second = roi_factory([(0, 0), (1, 0)])
        unmeasured = roi_factory([(0, 0), (1, 0)])
        first.measurements.length = 10
        second.measurements.length = 15

        assert MeasurementEngine.total_burden([first, second, unmeasured]) == 25

    def test_total_burden_empty(self):
        assert MeasurementEngine.total_burden([]) == 0


class TestRandomIntensityProxy:
    def test_range(self):
        proxy = RandomIntensityProxy(seed=7)

        values = [proxy.sample([]) for _ in range(200)]

        assert all(30 <= v < 90 for v in values)
        assert all(float(v).is_integer() for v in values)

    def test_keeps_previous(self):
        proxy = RandomIntensityProxy(seed=7)

        assert proxy.sample([], previous=55.0) == 55.0

    def test_seeded_draws_repeat(self):
        first = [RandomIntensityProxy(seed=3).sample([]) for _ in range(3)]
        second = [RandomIntensityProxy(seed=3).sample([]) for _ in range(3)]

        assert first == second

    def test_empty_range(self):
        with pytest.raises(ValueError):
            RandomIntensityProxy(low=50, high=50)


class TestImageIntensitySampler:
    """Mean grey inside a region"""

    def test_bright_half(self, test_image):
        sampler = ImageIntensitySampler(test_image)

        value = sampler.sample(_points([(5, 10), (40, 10), (40, 90), (5, 90)]))

        assert value == pytest.approx(200.0)

    def test_dark_half(self, test_image):
        sampler = ImageIntensitySampler(test_image)

        value = sampler.sample(_points([(60, 10), (95, 10), (95, 90), (60, 90)]))

        assert value == pytest.approx(50.0)

    def test_straddling_region_is_mixed(self, test_image):
        sampler = ImageIntensitySampler(test_image)

        value = sampler.sample(_points([(25, 10), (75, 10), (75, 90), (25, 90)]))

        assert 50.0 < value < 200.0

    def test_two_point_path_uses_stroke(self, test_image):
        sampler = ImageIntensitySampler(test_image)

        mask = sampler.mask_for(_points([(10, 50), (40, 50)]))
        value = sampler.sample(_points([(10, 50), (40, 50)]))

        assert mask.any()
        assert value == pytest.approx(200.0)

    def test_outside_image_keeps_previous(self, test_image):
        sampler = ImageIntensitySampler(test_image)
        outside = _points([(150, 150), (180, 150), (180, 180)])

        assert sampler.sample(outside, previous=61.0) == 61.0
        assert sampler.sample(outside) == 0.0

    def test_grayscale_input(self):
        gray = np.full((20, 20), 77, dtype=np.uint8)
        sampler = ImageIntensitySampler(gray)

        assert sampler.sample(_points([(10, 10), (90, 10), (90, 90)])) == pytest.approx(77.0)

    def test_empty_image(self):
        with pytest.raises(ValueError):
            ImageIntensitySampler(np.zeros((0, 0, 3), dtype=np.uint8))

    def test_engine_with_image_sampler(self, test_image):
        engine = MeasurementEngine(sampler=ImageIntensitySampler(test_image))

        result = engine.measure(
            _points([(5, 10), (40, 10), (40, 90)]), Measurements(hu_value=12.0)
        )

        assert result.hu_value == pytest.approx(200.0)
