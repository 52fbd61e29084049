"""
Unit tests for the gravity sub-model.

Tests:
- Rendering per gravity type
- Offset kind rules (smart, focus point, edges/corners)
- Default gravity only where allowed
"""

import pytest

from imgproxy_url.errors import GravityError, OptionError
from imgproxy_url.gravity import (
    FloatOffsets,
    Gravity,
    GravityType,
    IntegerOffsets,
    gravity_arguments,
)


class TestGravityRendering:
    """Test valid gravity values."""

    def test_edge_without_offsets(self):
        assert Gravity(GravityType.NORTH).render() == ("g", "no")

    def test_corner_with_integer_offsets(self):
        gravity = Gravity(GravityType.SOUTH_WEST, IntegerOffsets(10, 20))
        assert gravity.render() == ("g", "sowe:10:20")

    def test_center(self):
        assert Gravity(GravityType.CENTER).render() == ("g", "ce")

    def test_smart(self):
        assert Gravity(GravityType.SMART).render() == ("g", "sm")

    def test_focus_point_uses_three_decimals(self):
        assert Gravity.focus_point(0.25, 0.75).render() == ("g", "fp:0.250:0.750")

    def test_focus_point_bounds_are_inclusive(self):
        assert Gravity.focus_point(0, 1).render() == ("g", "fp:0.000:1.000")

    def test_string_type_is_accepted(self):
        assert Gravity("ea").render() == ("g", "ea")

    def test_default_allowed_when_embedded(self):
        assert gravity_arguments(Gravity(GravityType.DEFAULT), "c", allow_default=True) == []


class TestGravityValidation:
    """Test gravity invariants."""

    def test_default_rejected_for_gravity_option(self):
        with pytest.raises(GravityError, match="specific gravity type is required"):
            Gravity(GravityType.DEFAULT).render()

    def test_default_with_offsets_rejected(self):
        gravity = Gravity(GravityType.DEFAULT, IntegerOffsets(1, 2))
        with pytest.raises(GravityError):
            gravity_arguments(gravity, "c", allow_default=True)

    def test_smart_forbids_offsets(self):
        with pytest.raises(GravityError, match="smart"):
            Gravity(GravityType.SMART, IntegerOffsets(1, 2)).render()

    def test_focus_point_requires_offsets(self):
        with pytest.raises(GravityError, match="required"):
            Gravity(GravityType.FOCUS_POINT).render()

    def test_focus_point_rejects_integer_offsets(self):
        with pytest.raises(GravityError, match="floating-point"):
            Gravity(GravityType.FOCUS_POINT, IntegerOffsets(0, 1)).render()

    @pytest.mark.parametrize("x,y", [(-0.1, 0.5), (0.5, 1.01), (2, 0)])
    def test_focus_point_offsets_outside_unit_range(self, x, y):
        with pytest.raises(GravityError, match=r"\[0, 1\]"):
            Gravity.focus_point(x, y).render()

    @pytest.mark.parametrize("gravity_type", [
        GravityType.NORTH,
        GravityType.SOUTH_EAST,
        GravityType.CENTER,
    ])
    def test_float_offsets_rejected_outside_focus_point(self, gravity_type):
        with pytest.raises(GravityError, match="integer offsets"):
            Gravity(gravity_type, FloatOffsets(0.5, 0.5)).render()

    @pytest.mark.parametrize("x,y", [(0.5, 1.9), (1, 2.0), (True, 0)])
    def test_integer_offsets_must_hold_integers(self, x, y):
        with pytest.raises(GravityError, match="must be integers"):
            Gravity(GravityType.NORTH, IntegerOffsets(x, y)).render()

    @pytest.mark.parametrize("offsets", [IntegerOffsets("a", "b"), IntegerOffsets(None, 1)])
    def test_non_numeric_integer_offsets_raise_gravity_error(self, offsets):
        with pytest.raises(GravityError):
            Gravity(GravityType.SOUTH_WEST, offsets).render()

    @pytest.mark.parametrize("x,y", [("a", 0.5), (0.5, None), (False, 0.5)])
    def test_non_numeric_focus_point_offsets_raise_gravity_error(self, x, y):
        with pytest.raises(GravityError, match="must be numbers"):
            Gravity.focus_point(x, y).render()

    def test_nan_focus_point_rejected(self):
        with pytest.raises(GravityError, match=r"\[0, 1\]"):
            Gravity.focus_point(float("nan"), 0.5).render()

    def test_unknown_type_rejected(self):
        with pytest.raises(GravityError, match="unknown gravity type"):
            Gravity("nowhere").render()

    def test_gravity_error_is_option_error(self):
        with pytest.raises(OptionError) as exc_info:
            Gravity(GravityType.FOCUS_POINT).render()
        assert exc_info.value.option_key == "g"

    def test_embedding_option_key_reported(self):
        with pytest.raises(GravityError) as exc_info:
            gravity_arguments(Gravity(GravityType.SMART, IntegerOffsets(1, 1)), "c", allow_default=True)
        assert exc_info.value.option_key == "c"
