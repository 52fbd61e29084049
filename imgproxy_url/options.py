"""
Processing Option Catalog: one dataclass per option the server understands.

Each option is PURE DATA with a canonical short key and an arguments()
rule. render() (shared, see arguments.py) turns it into (key, argument
string). Nothing here knows about URLs, signing or ordering.

CRITICAL RULES:
1. The key identifies the option's slot; a URL keeps one value per slot
2. Constraints are checked in arguments(), never in the constructor,
   so building a chain of options never raises
3. A violated constraint raises OptionError; the URL object latches it

Adding an option means adding a dataclass with a key and an arguments().
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from .arguments import RenderableOption, format_fixed, format_float
from .errors import OptionError
from .gravity import Gravity, GravityType, gravity_arguments


@runtime_checkable
class ProcessingOption(Protocol):
    """Anything that renders to a (key, argument-string) path segment."""

    key: str

    def render(self) -> Tuple[str, str]:
        ...


# ============================================================================
# VALIDATION HELPERS
# ============================================================================

def _require_int(key: str, name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise OptionError(key, f"{name} must be an integer, got {value!r}")
    return value


def _require_number(key: str, name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise OptionError(key, f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise OptionError(key, f"{name} must be finite, got {value!r}")
    return float(value)


def _coerce_enum(key: str, enum_cls: type, value: Any) -> Enum:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise OptionError(key, f"unknown value {value!r}, expected one of: {allowed}") from None


# ============================================================================
# SIZE AND RESIZING
# ============================================================================

class ResizingMode(str, Enum):
    """How the server fits the source into the requested size."""
    FIT = "fit"      # Keep aspect ratio, fit inside the box
    FILL = "fill"    # Keep aspect ratio, fill the box and crop the rest
    AUTO = "auto"    # FILL when orientations match, FIT otherwise


class ResizingFilter(str, Enum):
    """Resampling algorithm used for resizing."""
    NEAREST = "nearest"
    LINEAR = "linear"
    CUBIC = "cubic"
    LANCZOS2 = "lanczos2"
    LANCZOS3 = "lanczos3"


@dataclass(frozen=True)
class Width(RenderableOption):
    """Width of the result. 0 derives it from height and aspect ratio."""

    key: ClassVar[str] = "w"

    width: int

    def arguments(self) -> List[Any]:
        value = _require_int(self.key, "width", self.width)
        if value < 0:
            raise OptionError(self.key, "width must be >= 0")
        return [value]


@dataclass(frozen=True)
class Height(RenderableOption):
    """Height of the result. 0 derives it from width and aspect ratio."""

    key: ClassVar[str] = "h"

    height: int

    def arguments(self) -> List[Any]:
        value = _require_int(self.key, "height", self.height)
        if value < 0:
            raise OptionError(self.key, "height must be >= 0")
        return [value]


@dataclass(frozen=True)
class ResizingType(RenderableOption):
    key: ClassVar[str] = "rt"

    mode: ResizingMode

    def arguments(self) -> List[Any]:
        return [_coerce_enum(self.key, ResizingMode, self.mode)]


@dataclass(frozen=True)
class ResizingAlgorithm(RenderableOption):
    key: ClassVar[str] = "ra"

    algorithm: ResizingFilter

    def arguments(self) -> List[Any]:
        return [_coerce_enum(self.key, ResizingFilter, self.algorithm)]


@dataclass(frozen=True)
class Dpr(RenderableOption):
    """Multiplies the result dimensions for HiDPI (Retina) screens."""

    key: ClassVar[str] = "dpr"

    dpr: int

    def arguments(self) -> List[Any]:
        value = _require_int(self.key, "dpr", self.dpr)
        if value <= 0:
            raise OptionError(self.key, "dpr must be greater than 0")
        return [value]


@dataclass(frozen=True)
class Enlarge(RenderableOption):
    """Allow the server to enlarge images smaller than the requested size."""

    key: ClassVar[str] = "el"

    enlarge: bool = True

    def arguments(self) -> List[Any]:
        return [bool(self.enlarge)]


@dataclass(frozen=True)
class Extend(RenderableOption):
    """
    Extend images smaller than the requested size.

    The optional gravity places the image on the extended canvas.
    Smart gravity has no meaning here and is rejected.
    """

    key: ClassVar[str] = "ex"

    extend: bool = True
    gravity: Optional[Gravity] = None

    def arguments(self) -> List[Any]:
        arguments: List[Any] = [bool(self.extend)]
        if self.gravity is not None:
            if self.gravity.type == GravityType.SMART:
                raise OptionError(self.key, "smart gravity type is not applicable here")
            arguments.extend(gravity_arguments(self.gravity, self.key, allow_default=True))
        return arguments


# ============================================================================
# CROPPING AND PADDING
# ============================================================================

@dataclass(frozen=True)
class Crop(RenderableOption):
    """
    Area of the source to process, applied before resizing.

    Width/height semantics:
    - >= 1: absolute pixels
    - < 1: relative to the source dimension
    - 0: full source dimension
    """

    key: ClassVar[str] = "c"

    width: float
    height: float
    gravity: Optional[Gravity] = None

    def arguments(self) -> List[Any]:
        width = _require_number(self.key, "width", self.width)
        height = _require_number(self.key, "height", self.height)
        if not (width >= 0 and height >= 0):
            raise OptionError(self.key, "crop width and height must be >= 0")
        arguments: List[Any] = [format_float(width), format_float(height)]
        if self.gravity is not None:
            arguments.extend(gravity_arguments(self.gravity, self.key, allow_default=True))
        return arguments


@dataclass(frozen=True)
class Padding(RenderableOption):
    """
    Padding in CSS order: top, right, bottom, left.

    Only the sides that are given are rendered, so Padding(10) renders
    "pd:10" and the server applies it to all four sides.
    """

    key: ClassVar[str] = "pd"

    top: int
    right: Optional[int] = None
    bottom: Optional[int] = None
    left: Optional[int] = None

    def arguments(self) -> List[Any]:
        sides = [self.top, self.right, self.bottom, self.left]
        while sides and sides[-1] is None:
            sides.pop()
        if None in sides:
            raise OptionError(self.key, "padding sides must be given in order without gaps")
        values = [_require_int(self.key, "padding", side) for side in sides]
        if any(value < 0 for value in values):
            raise OptionError(self.key, "padding must be >= 0")
        if not any(values):
            raise OptionError(self.key, "at least one padding dimension must be non-zero")
        return values


# ============================================================================
# FILTERS AND QUALITY
# ============================================================================

@dataclass(frozen=True)
class Sharpen(RenderableOption):
    """
    Sharpen filter. Sigma is the mask size.

    Rough guide: 0.5 for 4 px/mm (screens), 1.0 for 12 px/mm,
    1.5 for 16 px/mm (300 dpi).
    """

    key: ClassVar[str] = "sh"

    sigma: float

    def arguments(self) -> List[Any]:
        sigma = _require_number(self.key, "sigma", self.sigma)
        if not sigma > 0:
            raise OptionError(self.key, "sigma must be greater than 0")
        return [sigma]


@dataclass(frozen=True)
class Blur(RenderableOption):
    """Gaussian blur. Sigma is the mask size."""

    key: ClassVar[str] = "bl"

    sigma: int

    def arguments(self) -> List[Any]:
        sigma = _require_int(self.key, "sigma", self.sigma)
        if sigma < 0:
            raise OptionError(self.key, "sigma must be >= 0")
        return [sigma]


@dataclass(frozen=True)
class Quality(RenderableOption):
    """Output quality in percent. 0 lets the server use its configured default."""

    key: ClassVar[str] = "q"

    quality: int

    def arguments(self) -> List[Any]:
        quality = _require_int(self.key, "quality", self.quality)
        if not 0 <= quality <= 100:
            raise OptionError(self.key, "quality must be within 0..100")
        return [quality]


# Formats for which the server honours max-bytes
MAX_BYTES_FORMATS = frozenset({"jpg", "jpeg", "webp", "heic", "tiff"})


@dataclass(frozen=True)
class MaxBytes(RenderableOption):
    """
    Degrade quality until the result fits in max_bytes.

    Only jpg, webp, heic and tiff honour it; other formats ignore it.
    """

    key: ClassVar[str] = "mb"

    max_bytes: int

    def arguments(self) -> List[Any]:
        max_bytes = _require_int(self.key, "max_bytes", self.max_bytes)
        if max_bytes <= 0:
            raise OptionError(self.key, "max_bytes must be greater than 0")
        return [max_bytes]


# ============================================================================
# BACKGROUND
# ============================================================================

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True)
class Background(RenderableOption):
    """
    Background fill color, as either an (R, G, B) triple or a hex string.

    Exactly one form must be given:
        Background.from_rgb(255, 0, 0)  -> bg:255:0:0
        Background.from_hex("ff0000")   -> bg:ff0000
    """

    key: ClassVar[str] = "bg"

    rgb: Optional[Tuple[int, int, int]] = None
    hex_color: Optional[str] = None

    @classmethod
    def from_rgb(cls, red: int, green: int, blue: int) -> "Background":
        return cls(rgb=(red, green, blue))

    @classmethod
    def from_hex(cls, hex_color: str) -> "Background":
        return cls(hex_color=hex_color)

    def arguments(self) -> List[Any]:
        if (self.rgb is None) == (self.hex_color is None):
            raise OptionError(self.key, "exactly one of rgb or hex_color must be set")

        if self.hex_color is not None:
            if not self.hex_color or not set(self.hex_color) <= _HEX_DIGITS:
                raise OptionError(self.key, f"invalid hex color: {self.hex_color!r}")
            return [self.hex_color]

        if len(self.rgb) != 3:
            raise OptionError(self.key, "rgb must have exactly three channels")
        channels = [_require_int(self.key, "rgb channel", channel) for channel in self.rgb]
        if any(not 0 <= channel <= 255 for channel in channels):
            raise OptionError(self.key, "rgb channels must be within 0..255")
        return channels


@dataclass(frozen=True)
class BackgroundAlpha(RenderableOption):
    """Alpha of the background color, in [0, 1]."""

    key: ClassVar[str] = "bga"

    alpha: float

    def arguments(self) -> List[Any]:
        alpha = _require_number(self.key, "alpha", self.alpha)
        if not 0 <= alpha <= 1:
            raise OptionError(self.key, "alpha must be within [0, 1]")
        return [format_fixed(alpha)]


# ============================================================================
# PRESETS, TRIM, ROTATION, NAMING
# ============================================================================

@dataclass(frozen=True)
class Presets(RenderableOption):
    """Server-side presets to apply, in order."""

    key: ClassVar[str] = "pr"

    names: Sequence[str]

    def __post_init__(self):
        # Store an immutable copy so the option stays hashable
        if isinstance(self.names, str):
            object.__setattr__(self, "names", (self.names,))
        else:
            object.__setattr__(self, "names", tuple(self.names))

    def arguments(self) -> List[Any]:
        if not self.names:
            raise OptionError(self.key, "at least one preset name is required")
        if any(not isinstance(name, str) or not name for name in self.names):
            raise OptionError(self.key, "preset names must be non-empty strings")
        return list(self.names)


@dataclass(frozen=True)
class Trim(RenderableOption):
    """
    Remove surrounding background.

    Always renders four positional arguments; unset modifiers stay empty:
        Trim(10, equal_hor=True)  -> t:10::1:

    Args:
        threshold: Color similarity tolerance
        color: Hex color to cut off (server detects it when unset)
        equal_hor: Cut equal amounts from left and right
        equal_ver: Cut equal amounts from top and bottom
    """

    key: ClassVar[str] = "t"

    threshold: int
    color: Optional[str] = None
    equal_hor: bool = False
    equal_ver: bool = False

    def arguments(self) -> List[Any]:
        threshold = _require_int(self.key, "threshold", self.threshold)
        if threshold < 0:
            raise OptionError(self.key, "threshold must be >= 0")
        return [
            threshold,
            self.color or "",
            "1" if self.equal_hor else "",
            "1" if self.equal_ver else "",
        ]


@dataclass(frozen=True)
class Rotate(RenderableOption):
    """Rotate by a multiple of 90 degrees, after EXIF auto-rotation."""

    key: ClassVar[str] = "rot"

    angle: int

    def arguments(self) -> List[Any]:
        angle = _require_int(self.key, "angle", self.angle)
        if angle % 90 != 0:
            raise OptionError(self.key, "angle must be a multiple of 90")
        return [angle]


@dataclass(frozen=True)
class AutoRotate(RenderableOption):
    """Rotate according to the EXIF orientation tag."""

    key: ClassVar[str] = "ar"

    auto_rotate: bool = True

    def arguments(self) -> List[Any]:
        return [bool(self.auto_rotate)]


@dataclass(frozen=True)
class Filename(RenderableOption):
    """Filename for the Content-Disposition header."""

    key: ClassVar[str] = "fn"

    filename: str

    def arguments(self) -> List[Any]:
        return [self.filename]


# ============================================================================
# RAW
# ============================================================================

@dataclass(frozen=True)
class Raw(RenderableOption):
    """
    Escape hatch for options this catalog does not model.

    Arguments are rendered with the same per-type rules as every other
    option. Their meaning is the caller's responsibility.
    """

    key: str
    params: Sequence[Any] = ()

    def __post_init__(self):
        object.__setattr__(self, "params", tuple(self.params))

    def arguments(self) -> List[Any]:
        if not self.key or "/" in self.key or ":" in self.key:
            raise OptionError(self.key, "raw option key must be non-empty and contain no '/' or ':'")
        return list(self.params)
