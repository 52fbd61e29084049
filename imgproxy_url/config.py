"""
Environment configuration for URL signing.

Environment variables:
    IMGPROXY_KEY: Hex-encoded signing key
    IMGPROXY_SALT: Hex-encoded signing salt
    IMGPROXY_SIGNATURE_SIZE: Signature truncation in bytes (0-32, default 32)
    IMGPROXY_ENDPOINT: Prefix for rendered URLs

Key and salt only make sense together. When exactly one of them is set
the configuration is partial and applying it raises ConfigurationError.
Empty variables count as unset.
"""

import logging
import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .controls import Endpoint, Key, Salt, SignatureSize
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


ENV_KEY = "IMGPROXY_KEY"
ENV_SALT = "IMGPROXY_SALT"
ENV_SIGNATURE_SIZE = "IMGPROXY_SIGNATURE_SIZE"
ENV_ENDPOINT = "IMGPROXY_ENDPOINT"

_HEX_DIGITS = frozenset("0123456789abcdef")


class SigningConfig(BaseModel):
    """
    Validated signing configuration.

    Unknown fields are rejected. Hex values are normalized to lowercase.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: Optional[str] = None
    salt: Optional[str] = None
    signature_size: int = Field(default=0, ge=0, le=32)
    endpoint: Optional[str] = None

    @field_validator("key", "salt")
    @classmethod
    def validate_hex(cls, v: Optional[str]) -> Optional[str]:
        """Key and salt must be even-length hex strings."""
        if v is None:
            return None
        v = v.strip().lower()
        if not v:
            return None
        if len(v) % 2 != 0 or not set(v) <= _HEX_DIGITS:
            raise ValueError("must be an even-length hex string")
        return v

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SigningConfig":
        """
        Read signing configuration from the environment.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        values = {
            "key": env.get(ENV_KEY) or None,
            "salt": env.get(ENV_SALT) or None,
            "endpoint": env.get(ENV_ENDPOINT) or None,
        }
        signature_size = env.get(ENV_SIGNATURE_SIZE)
        if signature_size:
            values["signature_size"] = signature_size.strip()

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid imgproxy environment configuration: {e}") from e

    @property
    def is_partial(self) -> bool:
        """Exactly one of key/salt is set."""
        return (self.key is None) != (self.salt is None)

    def to_options(self) -> List[object]:
        """
        Control options for the values present.

        Raises:
            ConfigurationError: If only one of key/salt is set
        """
        if self.is_partial:
            missing = ENV_SALT if self.salt is None else ENV_KEY
            raise ConfigurationError(
                f"Partial signing configuration: {missing} is not set. "
                f"Set both {ENV_KEY} and {ENV_SALT}, or neither."
            )

        options: List[object] = []
        if self.key is not None:
            options.extend([Key(self.key), Salt(self.salt)])
        if self.signature_size:
            options.append(SignatureSize(self.signature_size))
        if self.endpoint is not None:
            options.append(Endpoint(self.endpoint))
        return options


def configure_from_env(environ: Optional[Mapping[str, str]] = None) -> SigningConfig:
    """
    Apply environment signing configuration to the process-wide default URL.

    Must be called before the default is shared between threads.

    Returns:
        The configuration that was applied

    Raises:
        ConfigurationError: If the configuration is partial or invalid
    """
    from .url import configure_default

    config = SigningConfig.from_env(environ)
    options = config.to_options()
    configure_default(*options)
    logger.debug("Applied %d option(s) from environment to default URL", len(options))
    return config
