"""
Control options: everything a URL accepts that is not a path segment.

These set dedicated fields on the URL object (source, output format,
signing material, endpoint) instead of landing in the options map.
They are passed alongside processing options:

    new("local:///img.jpg", Width(200), Format("png"), Key(hex_key), Salt(hex_salt))
"""

import binascii
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import HexDecodeError


def decode_hex(field: str, value: str) -> bytes:
    """
    Decode hex-encoded signing material.

    Raises:
        HexDecodeError: If value is not an even-length hex string
    """
    try:
        return binascii.unhexlify(value.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError, AttributeError) as e:
        raise HexDecodeError(field, value, str(e)) from e


@dataclass(frozen=True)
class Format:
    """Output format extension, e.g. "png". Empty keeps the source format."""
    format: str


@dataclass(frozen=True)
class SourceURL:
    """Replaces the source URL of the image."""
    url: str


@dataclass(frozen=True)
class PlainSourceURL:
    """Encode the source as "plain/<escaped url>" instead of base64."""
    plain: bool = True


@dataclass(frozen=True)
class Key:
    """Hex-encoded signing key."""
    key: str


@dataclass(frozen=True)
class Salt:
    """Hex-encoded signing salt."""
    salt: str


@dataclass(frozen=True)
class KeyRaw:
    """Signing key as raw bytes, used without hex decoding."""
    key: bytes


@dataclass(frozen=True)
class SaltRaw:
    """Signing salt as raw bytes, used without hex decoding."""
    salt: bytes


@dataclass(frozen=True)
class Endpoint:
    """Prefix for the rendered URL, e.g. "https://images.example.com/"."""
    endpoint: str


@dataclass(frozen=True)
class SignatureSize:
    """Truncate the signature to this many bytes. 0 keeps all 32."""
    size: int


@dataclass(frozen=True)
class FromEnvironment:
    """
    Apply signing material from IMGPROXY_KEY / IMGPROXY_SALT.

    When only one of the two is set the URL is marked invalid and the
    ConfigurationError surfaces when the URL is built.

    Args:
        environ: Mapping to read instead of os.environ (tests)
    """
    environ: Optional[Mapping[str, str]] = None
