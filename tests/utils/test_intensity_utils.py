"""
Property-based tests for intensity utility functions.
"""

import math

import pytest
from hypothesis import given, settings, strategies as st

from pxevidence.utils.intensity_utils import (
    calculate_apex_intensity,
    calculate_total_intensity,
)

valid_intensity = st.floats(
    min_value=0.0, max_value=1e15, allow_nan=False, allow_infinity=False
)

mixed_intensity = st.one_of(
    st.floats(min_value=-1e10, max_value=1e15, allow_nan=False, allow_infinity=False),
    st.just(float("nan")),
    st.none(),
)


class TestCalculateTotalIntensity:
    """Tests for calculate_total_intensity function."""

    @settings(max_examples=100)
    @given(st.lists(valid_intensity, min_size=1, max_size=100))
    def test_property_total_equals_sum_of_all_intensities(self, intensities):
        result = calculate_total_intensity(intensities)
        expected = sum(intensities)
        if not math.isclose(result, expected, rel_tol=1e-9):
            pytest.fail(f"Expected {expected}, got {result}")

    def test_empty_list_returns_zero(self):
        assert calculate_total_intensity([]) == 0.0

    def test_filters_nan_and_negative_values(self):
        result = calculate_total_intensity([100.0, float("nan"), -50.0, None, 200.0])
        if not math.isclose(result, 300.0, rel_tol=1e-9):
            pytest.fail(f"Expected 300.0, got {result}")


class TestCalculateApexIntensity:
    """Tests for calculate_apex_intensity function."""

    @settings(max_examples=100)
    @given(st.lists(valid_intensity, min_size=1, max_size=100))
    def test_property_apex_equals_maximum(self, intensities):
        assert calculate_apex_intensity(intensities) == max(intensities)

    @settings(max_examples=100)
    @given(st.lists(mixed_intensity, max_size=50))
    def test_property_apex_never_below_zero(self, intensities):
        result = calculate_apex_intensity(intensities)
        assert result >= 0.0
        assert not math.isnan(result)

    def test_empty_list_returns_zero(self):
        assert calculate_apex_intensity([]) == 0.0

    def test_generator_input(self):
        assert calculate_apex_intensity(x for x in (1.0, 5.0, 3.0)) == 5.0
