"""
URL builder error types.

All errors inherit from ImgproxyURLError for easy catching.
Errors are explicit and provide actionable messages.

Two propagation modes exist:
- HexDecodeError surfaces immediately from the call that applied the option
- OptionError and ConfigurationError are latched on the URL object and
  surface when the URL is finalized
"""

from typing import Optional


class ImgproxyURLError(Exception):
    """Base exception for all URL construction failures."""
    pass


class HexDecodeError(ImgproxyURLError, ValueError):
    """Raised when a hex-encoded key or salt cannot be decoded."""

    def __init__(self, field: str, value: str, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"hexdecode: invalid {field}: {reason}")


class OptionError(ImgproxyURLError, ValueError):
    """
    Raised when a processing option violates its constraints.

    Latched on the URL object that received the option.
    """

    def __init__(self, option_key: Optional[str], message: str):
        self.option_key = option_key
        self.message = message
        if option_key:
            super().__init__(f"option '{option_key}': {message}")
        else:
            super().__init__(message)


class GravityError(OptionError):
    """Raised when a gravity value breaks the offset rules of its type."""
    pass


class MissingSourceError(OptionError):
    """Raised at finalization when no source URL was set."""

    def __init__(self):
        super().__init__(None, "source url is required")


class ConfigurationError(ImgproxyURLError):
    """Raised when signing material from the environment is incomplete or invalid."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
