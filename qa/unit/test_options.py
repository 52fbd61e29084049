"""
Unit tests for the processing option catalog.

Tests:
- Canonical key and rendering of every option
- Constraint violations raise OptionError at render time, not construction
- Options are immutable
"""

import math

import pytest

from imgproxy_url.errors import GravityError, OptionError
from imgproxy_url.gravity import FloatOffsets, Gravity, GravityType, IntegerOffsets
from imgproxy_url.options import (
    AutoRotate,
    Background,
    BackgroundAlpha,
    Blur,
    Crop,
    Dpr,
    Enlarge,
    Extend,
    Filename,
    Height,
    MaxBytes,
    Padding,
    Presets,
    ProcessingOption,
    Quality,
    Raw,
    ResizingAlgorithm,
    ResizingFilter,
    ResizingMode,
    ResizingType,
    Rotate,
    Sharpen,
    Trim,
    Width,
)


class TestRendering:
    """Test (key, arguments) of each option."""

    @pytest.mark.parametrize("option,expected", [
        (Width(200), ("w", "200")),
        (Width(0), ("w", "0")),
        (Height(300), ("h", "300")),
        (ResizingType(ResizingMode.FILL), ("rt", "fill")),
        (ResizingType("auto"), ("rt", "auto")),
        (ResizingAlgorithm(ResizingFilter.LANCZOS3), ("ra", "lanczos3")),
        (Dpr(2), ("dpr", "2")),
        (Enlarge(), ("el", "true")),
        (Enlarge(False), ("el", "false")),
        (Extend(), ("ex", "true")),
        (Extend(True, Gravity(GravityType.NORTH, IntegerOffsets(5, 6))), ("ex", "true:no:5:6")),
        (Extend(True, Gravity(GravityType.DEFAULT)), ("ex", "true")),
        (Crop(100, 50), ("c", "100:50")),
        (Crop(0.5, 0.5, Gravity.focus_point(0.25, 0.75)), ("c", "0.5:0.5:fp:0.250:0.750")),
        (Crop(0, 200, Gravity(GravityType.SMART)), ("c", "0:200:sm")),
        (Padding(10), ("pd", "10")),
        (Padding(10, 20), ("pd", "10:20")),
        (Padding(1, 2, 3, 4), ("pd", "1:2:3:4")),
        (Padding(0, 0, 5), ("pd", "0:0:5")),
        (Sharpen(0.5), ("sh", "0.5")),
        (Sharpen(1), ("sh", "1")),
        (Blur(0), ("bl", "0")),
        (Blur(3), ("bl", "3")),
        (Quality(80), ("q", "80")),
        (Quality(0), ("q", "0")),
        (MaxBytes(10240), ("mb", "10240")),
        (Background.from_rgb(255, 0, 10), ("bg", "255:0:10")),
        (Background.from_hex("ffAA00"), ("bg", "ffAA00")),
        (BackgroundAlpha(0.5), ("bga", "0.500")),
        (BackgroundAlpha(1), ("bga", "1.000")),
        (Presets(["thumb", "sharp"]), ("pr", "thumb:sharp")),
        (Presets("thumb"), ("pr", "thumb")),
        (Trim(10), ("t", "10:::")),
        (Trim(10, equal_hor=True), ("t", "10::1:")),
        (Trim(5, color="ffffff", equal_hor=True, equal_ver=True), ("t", "5:ffffff:1:1")),
        (Rotate(90), ("rot", "90")),
        (Rotate(270), ("rot", "270")),
        (AutoRotate(), ("ar", "true")),
        (AutoRotate(False), ("ar", "false")),
        (Filename("my image.png"), ("fn", "my image.png")),
        (Raw("z", [50]), ("z", "50")),
        (Raw("st"), ("st", "")),
        (Raw("x", [1, "a", False, 0.5, GravityType.CENTER]), ("x", "1:a:false:0.5:ce")),
    ])
    def test_render(self, option, expected):
        assert option.render() == expected

    def test_key_is_class_level(self):
        assert Width.key == "w"
        assert Trim.key == "t"
        assert Gravity.key == "g"

    def test_background_forms_share_slot(self):
        assert Background.from_rgb(1, 2, 3).render()[0] == Background.from_hex("fff").render()[0]

    def test_all_options_satisfy_protocol(self):
        for option in (Width(1), Gravity(GravityType.CENTER), Raw("z"), Trim(0)):
            assert isinstance(option, ProcessingOption)


class TestConstraints:
    """Test that invalid options fail when rendered."""

    @pytest.mark.parametrize("option", [
        Width(-1),
        Height(-10),
        Width("200"),
        Width(True),
        ResizingType("stretch"),
        ResizingAlgorithm("bicubic"),
        Dpr(0),
        Crop(-1, 10),
        Crop(10, -0.5),
        Crop(math.nan, 1),
        Crop(1, math.inf),
        Padding(0),
        Padding(0, 0, 0, 0),
        Padding(-1, 5),
        Padding(1, None, 3),
        Sharpen(0),
        Sharpen(-1.5),
        Sharpen(math.nan),
        Sharpen(math.inf),
        Blur(-1),
        Quality(101),
        Quality(-1),
        MaxBytes(0),
        Background(),
        Background(rgb=(1, 2, 3), hex_color="ffffff"),
        Background.from_rgb(256, 0, 0),
        Background(rgb=(1, 2)),
        Background.from_hex("#ffffff"),
        Background.from_hex(""),
        BackgroundAlpha(1.5),
        BackgroundAlpha(-0.1),
        BackgroundAlpha(math.nan),
        Presets([]),
        Presets(["ok", ""]),
        Trim(-1),
        Rotate(45),
        Raw(""),
        Raw("a/b"),
    ])
    def test_invalid_option_raises(self, option):
        with pytest.raises(OptionError):
            option.render()

    def test_construction_never_raises(self):
        """Invalid values are only reported when rendered."""
        option = Quality(500)
        assert option.quality == 500

    def test_error_carries_option_key(self):
        with pytest.raises(OptionError) as exc_info:
            Quality(500).render()
        assert exc_info.value.option_key == "q"
        assert "q" in str(exc_info.value)

    def test_extend_rejects_smart_gravity(self):
        with pytest.raises(OptionError, match="smart"):
            Extend(True, Gravity(GravityType.SMART)).render()

    def test_crop_rejects_float_offsets_outside_focus_point(self):
        with pytest.raises(GravityError):
            Crop(100, 100, Gravity(GravityType.NORTH, FloatOffsets(0.1, 0.2))).render()

    def test_crop_rejects_focus_point_without_offsets(self):
        with pytest.raises(GravityError):
            Crop(100, 100, Gravity(GravityType.FOCUS_POINT)).render()


class TestImmutability:
    """Test that options are frozen values."""

    def test_options_are_frozen(self):
        width = Width(100)
        with pytest.raises((AttributeError, TypeError)):
            width.width = 200

    def test_equal_options_compare_equal(self):
        assert Trim(10, equal_hor=True) == Trim(10, equal_hor=True)
        assert Presets(["a", "b"]) == Presets(("a", "b"))

    def test_presets_copy_input(self):
        names = ["a"]
        presets = Presets(names)
        names.append("b")
        assert presets.render() == ("pr", "a")
