"""
ImgproxyURL: the URL value object.

A URL is built once from a source and a list of options, and "modified"
only by with_options(), which returns a fresh copy:

    base = new("local:///img.jpg", Width(200))
    thumb = base.with_options(Height(100), Format("webp"))
    str(thumb)  # "/insecure/h:100/w:200/bG9jYWw6Ly8vaW1nLmpwZw.webp"

CRITICAL RULES:
1. with_options() never mutates the receiver
2. Options are stored per key; the last value for a key wins
3. Constraint violations are LATCHED: the first OptionError or
   ConfigurationError is kept on the object and raised by build();
   later ones are discarded
4. Hex decoding errors are raised immediately

Process-wide default:
    new() clones a module-level default URL, so endpoint and signing
    material can be configured once (set_key_salt, set_endpoint,
    configure_from_env). The default is NOT synchronized: configure it
    before sharing it between threads. Callers who need isolation build
    their own base with ImgproxyURL().with_options(...).
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from .config import SigningConfig
from .controls import (
    Endpoint,
    Format,
    FromEnvironment,
    Key,
    KeyRaw,
    PlainSourceURL,
    Salt,
    SaltRaw,
    SignatureSize,
    SourceURL,
    decode_hex,
)
from .errors import (
    ConfigurationError,
    ImgproxyURLError,
    MissingSourceError,
    OptionError,
)
from .options import MAX_BYTES_FORMATS, MaxBytes, ProcessingOption
from .path import build_path, render_segment
from .signing import FULL_SIGNATURE_SIZE, signature_for

logger = logging.getLogger(__name__)


@dataclass
class ImgproxyURL:
    """
    Source, processing options and signing material for one image URL.

    Attributes:
        source_url: Source image locator
        options: Option key -> rendered argument string
        key: Raw signing key
        salt: Raw signing salt
        plain_source_url: Encode the source in plain mode
        format: Output format, empty keeps the source format
        endpoint: Prefix for the rendered URL
        signature_size: Signature truncation in bytes, 0 for the full 32
        error: First latched constraint violation, raised by build()
    """

    source_url: str = ""
    options: Dict[str, str] = field(default_factory=dict)
    key: Optional[bytes] = None
    salt: Optional[bytes] = None
    plain_source_url: bool = False
    format: str = ""
    endpoint: str = ""
    signature_size: int = 0
    error: Optional[ImgproxyURLError] = field(default=None, compare=False, repr=False)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def with_options(self, *options: Any) -> "ImgproxyURL":
        """
        Return a copy of this URL with additional options applied.

        Raises:
            HexDecodeError: If a Key or Salt option is not valid hex
        """
        clone = replace(self, options=dict(self.options))
        clone._apply(options)
        return clone

    def _apply(self, options) -> None:
        for option in options:
            try:
                self._apply_one(option)
            except (OptionError, ConfigurationError) as e:
                self._latch(e)

    def _apply_one(self, option: Any) -> None:
        if isinstance(option, Format):
            self.format = option.format
        elif isinstance(option, SourceURL):
            self.source_url = option.url
        elif isinstance(option, PlainSourceURL):
            self.plain_source_url = bool(option.plain)
        elif isinstance(option, Key):
            self.key = decode_hex("key", option.key)
        elif isinstance(option, Salt):
            self.salt = decode_hex("salt", option.salt)
        elif isinstance(option, KeyRaw):
            self.key = bytes(option.key)
        elif isinstance(option, SaltRaw):
            self.salt = bytes(option.salt)
        elif isinstance(option, Endpoint):
            self.endpoint = option.endpoint
        elif isinstance(option, SignatureSize):
            size = option.size
            if isinstance(size, bool) or not isinstance(size, int) or not 0 <= size <= FULL_SIGNATURE_SIZE:
                raise OptionError(None, f"signature size must be within 0..{FULL_SIGNATURE_SIZE}, got {size!r}")
            self.signature_size = size
        elif isinstance(option, FromEnvironment):
            self._apply(SigningConfig.from_env(option.environ).to_options())
        elif isinstance(option, ProcessingOption):
            key, arguments = option.render()
            self.options[key] = arguments
            logger.debug("Applied option %s", render_segment(key, arguments))
        else:
            raise TypeError(f"Unsupported option type: {type(option).__name__}")

    def _latch(self, error: ImgproxyURLError) -> None:
        if self.error is None:
            logger.debug("Latched URL error: %s", error)
            self.error = error
        else:
            logger.warning("Discarding additional URL error after first failure: %s", error)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def check(self) -> None:
        """
        Raise the latched error, or MissingSourceError when no source is set.
        """
        if self.error is not None:
            raise self.error
        if not self.source_url:
            raise MissingSourceError()

    def path(self) -> str:
        """Serialized, unsigned path: /<segments>/<encoded source>."""
        self.check()
        return build_path(self.options, self.source_url, self.plain_source_url, self.format)

    def signature(self) -> str:
        """Signature of path(), or "insecure" without key and salt."""
        return signature_for(self.key, self.salt, self.path(), self.signature_size)

    def build(self) -> str:
        """
        Render the final URL: <endpoint>/<signature><path>.

        Raises:
            OptionError: The first constraint violation latched on this URL
            ConfigurationError: Partial signing material from the environment
            MissingSourceError: No source URL was set
        """
        path = self.path()
        signature = signature_for(self.key, self.salt, path, self.signature_size)

        if (
            MaxBytes.key in self.options
            and self.format
            and self.format.lower() not in MAX_BYTES_FORMATS
        ):
            logger.warning(
                "max_bytes is ignored for format '%s' (supported: %s)",
                self.format,
                ", ".join(sorted(MAX_BYTES_FORMATS)),
            )

        signed_path = f"/{signature}{path}"
        endpoint = self.endpoint
        if endpoint.endswith("/"):
            endpoint = endpoint[:-1]
        return endpoint + signed_path

    def __str__(self) -> str:
        return self.build()


# ============================================================================
# PROCESS-WIDE DEFAULT
# ============================================================================

_default = ImgproxyURL()


def default_url() -> ImgproxyURL:
    """The process-wide default URL that new() clones."""
    return _default


def configure_default(*options: Any) -> None:
    """
    Apply options to the process-wide default.

    Unlike with_options(), constraint violations are raised here and the
    default is left unchanged, so a bad setting never poisons every URL.

    Raises:
        HexDecodeError: If a Key or Salt option is not valid hex
        OptionError: If an option violates its constraints
        ConfigurationError: If environment signing material is partial
    """
    global _default
    updated = _default.with_options(*options)
    if updated.error is not None:
        raise updated.error
    _default = updated


def reset_default() -> None:
    """Forget all default configuration."""
    global _default
    _default = ImgproxyURL()


def new(source_url: str, *options: Any) -> ImgproxyURL:
    """
    Create a URL for source_url from the process-wide default.

    source_url always wins over a SourceURL among options.

    Raises:
        HexDecodeError: If a Key or Salt option is not valid hex
    """
    url = _default.with_options(*options)
    url.source_url = source_url
    return url


def set_key_salt(key: str, salt: str) -> None:
    """Set hex-encoded signing material on the default URL."""
    configure_default(Key(key), Salt(salt))


def set_key_salt_raw(key: bytes, salt: bytes) -> None:
    configure_default(KeyRaw(key), SaltRaw(salt))


def set_endpoint(endpoint: str) -> None:
    configure_default(Endpoint(endpoint))


def set_signature_size(size: int) -> None:
    configure_default(SignatureSize(size))
