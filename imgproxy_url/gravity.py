"""
Gravity sub-model, shared by the gravity, crop and extend options.

A gravity value is a (type, offsets) pair. The rules per type:

- DEFAULT: renders nothing; only valid where the gravity is optional
  (crop, extend) and never with offsets
- SMART: renders "sm"; offsets are forbidden
- FOCUS_POINT: renders "fp:X:Y" with X, Y to 3 decimals; offsets are
  required, must be FloatOffsets and must lie within [0, 1]
- any other type: renders its tag, optionally followed by integer X, Y;
  FloatOffsets are rejected

Violations raise GravityError. The URL object latches it instead of
letting it interrupt a chain of options.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, List, Optional, Union

from .arguments import RenderableOption, format_fixed
from .errors import GravityError


class GravityType(str, Enum):
    """Which part of the image to keep when cutting."""
    DEFAULT = ""             # Server default, same as not specifying gravity
    NORTH = "no"             # Top edge
    SOUTH = "so"             # Bottom edge
    EAST = "ea"              # Right edge
    WEST = "we"              # Left edge
    NORTH_EAST = "noea"      # Top-right corner
    NORTH_WEST = "nowe"      # Top-left corner
    SOUTH_EAST = "soea"      # Bottom-right corner
    SOUTH_WEST = "sowe"      # Bottom-left corner
    CENTER = "ce"
    SMART = "sm"             # libvips picks the most interesting region
    FOCUS_POINT = "fp"       # Relative center coordinates in [0, 1]


@dataclass(frozen=True)
class IntegerOffsets:
    """Pixel offsets from the gravity edge or corner."""
    x: int
    y: int

    def arguments(self) -> List[int]:
        return [self.x, self.y]


@dataclass(frozen=True)
class FloatOffsets:
    """Relative coordinates, used only by focus point gravity."""
    x: float
    y: float

    def arguments(self) -> List[float]:
        return [self.x, self.y]


GravityOffsets = Union[IntegerOffsets, FloatOffsets]


def _coerce_type(value, option_key: str) -> GravityType:
    try:
        return GravityType(value)
    except ValueError:
        raise GravityError(option_key, f"unknown gravity type: {value!r}") from None


def _check_offsets(offsets, types, option_key: str, message: str) -> None:
    for value in (offsets.x, offsets.y):
        if isinstance(value, bool) or not isinstance(value, types):
            raise GravityError(option_key, f"{message}, got {value!r}")


def gravity_arguments(
    gravity: "Gravity",
    option_key: str = "g",
    allow_default: bool = False,
) -> List[str]:
    """
    Validate a gravity value and produce its argument tokens.

    Args:
        gravity: The gravity value to render
        option_key: Key of the option embedding the gravity (for errors)
        allow_default: Whether GravityType.DEFAULT is acceptable here

    Returns:
        Argument tokens, e.g. ["no", "10", "20"] or ["fp", "0.250", "0.750"]

    Raises:
        GravityError: If the type/offsets combination is invalid
    """
    gravity_type = _coerce_type(gravity.type, option_key)
    offsets = gravity.offsets

    if gravity_type == GravityType.DEFAULT:
        if not allow_default:
            raise GravityError(option_key, "specific gravity type is required")
        if offsets is not None:
            raise GravityError(option_key, "offsets are not applicable for default gravity")
        return []

    if gravity_type == GravityType.SMART:
        if offsets is not None:
            raise GravityError(option_key, "offsets are not applicable for smart gravity")
        return [gravity_type.value]

    if gravity_type == GravityType.FOCUS_POINT:
        if offsets is None:
            raise GravityError(option_key, "offsets are required for focus point gravity")
        if not isinstance(offsets, FloatOffsets):
            raise GravityError(option_key, "focus point gravity requires floating-point offsets")
        _check_offsets(offsets, (int, float), option_key, "focus point offsets must be numbers")
        if not (0 <= offsets.x <= 1 and 0 <= offsets.y <= 1):
            raise GravityError(option_key, "float offsets must be within [0, 1] range")
        return [gravity_type.value, format_fixed(offsets.x), format_fixed(offsets.y)]

    if offsets is None:
        return [gravity_type.value]
    if not isinstance(offsets, IntegerOffsets):
        raise GravityError(option_key, "integer offsets are required")
    _check_offsets(offsets, int, option_key, "integer offsets must be integers")
    return [gravity_type.value, str(offsets.x), str(offsets.y)]


@dataclass(frozen=True)
class Gravity(RenderableOption):
    """
    Gravity option ("g"), also embedded by Crop and Extend.

    Examples:
        Gravity(GravityType.NORTH_EAST, IntegerOffsets(10, 20))  -> g:noea:10:20
        Gravity.focus_point(0.25, 0.75)                          -> g:fp:0.250:0.750
    """

    key: ClassVar[str] = "g"

    type: GravityType
    offsets: Optional[GravityOffsets] = None

    @classmethod
    def focus_point(cls, x: float, y: float) -> "Gravity":
        return cls(GravityType.FOCUS_POINT, FloatOffsets(x, y))

    def arguments(self) -> List[str]:
        return gravity_arguments(self, self.key)
