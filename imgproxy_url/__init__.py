"""
imgproxy_url: Build and sign imgproxy URLs.

The library only produces strings. No HTTP, no image decoding.

Architecture:
- options.py: Processing option catalog (pure data + render rules)
- gravity.py: Gravity value shared by gravity, crop and extend
- controls.py: Source, format, signing and endpoint controls
- path.py: Canonical path serialization
- signing.py: HMAC-SHA256 signatures
- url.py: ImgproxyURL value object and the process-wide default
- config.py: Signing configuration from the environment

Usage:
    from imgproxy_url import new, Width, Height, Format, Key, Salt

    url = new("local:///img.jpg", Width(200), Height(200), Format("png"),
              Key(hex_key), Salt(hex_salt))
    str(url)
"""

__version__ = "0.3.0"

from .errors import (
    ImgproxyURLError,
    HexDecodeError,
    OptionError,
    GravityError,
    MissingSourceError,
    ConfigurationError,
)

from .gravity import (
    Gravity,
    GravityType,
    IntegerOffsets,
    FloatOffsets,
)

from .options import (
    ProcessingOption,
    ResizingMode,
    ResizingFilter,
    Width,
    Height,
    ResizingType,
    ResizingAlgorithm,
    Dpr,
    Enlarge,
    Extend,
    Crop,
    Padding,
    Sharpen,
    Blur,
    Quality,
    MaxBytes,
    Background,
    BackgroundAlpha,
    Presets,
    Trim,
    Rotate,
    AutoRotate,
    Filename,
    Raw,
)

from .controls import (
    Format,
    SourceURL,
    PlainSourceURL,
    Key,
    Salt,
    KeyRaw,
    SaltRaw,
    Endpoint,
    SignatureSize,
    FromEnvironment,
)

from .url import (
    ImgproxyURL,
    new,
    default_url,
    configure_default,
    reset_default,
    set_key_salt,
    set_key_salt_raw,
    set_endpoint,
    set_signature_size,
)

from .config import (
    SigningConfig,
    configure_from_env,
)

from .signing import sign_path, INSECURE_SIGNATURE

__all__ = [
    # Errors
    "ImgproxyURLError",
    "HexDecodeError",
    "OptionError",
    "GravityError",
    "MissingSourceError",
    "ConfigurationError",

    # Gravity
    "Gravity",
    "GravityType",
    "IntegerOffsets",
    "FloatOffsets",

    # Processing options
    "ProcessingOption",
    "ResizingMode",
    "ResizingFilter",
    "Width",
    "Height",
    "ResizingType",
    "ResizingAlgorithm",
    "Dpr",
    "Enlarge",
    "Extend",
    "Crop",
    "Padding",
    "Sharpen",
    "Blur",
    "Quality",
    "MaxBytes",
    "Background",
    "BackgroundAlpha",
    "Presets",
    "Trim",
    "Rotate",
    "AutoRotate",
    "Filename",
    "Raw",

    # Controls
    "Format",
    "SourceURL",
    "PlainSourceURL",
    "Key",
    "Salt",
    "KeyRaw",
    "SaltRaw",
    "Endpoint",
    "SignatureSize",
    "FromEnvironment",

    # URL
    "ImgproxyURL",
    "new",
    "default_url",
    "configure_default",
    "reset_default",
    "set_key_salt",
    "set_key_salt_raw",
    "set_endpoint",
    "set_signature_size",

    # Configuration
    "SigningConfig",
    "configure_from_env",

    # Signing
    "sign_path",
    "INSECURE_SIGNATURE",
]
