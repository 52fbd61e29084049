"""
URL signing.

signature = base64url-no-pad( HMAC-SHA256(key, salt + path)[:size] )

A URL without key or salt is not signed; its signature slot carries the
literal "insecure", which the server accepts only when signing is off.
"""

import hashlib
import hmac
import logging
from typing import Optional

from .path import b64encode_url

logger = logging.getLogger(__name__)

INSECURE_SIGNATURE = "insecure"

# Full HMAC-SHA256 digest length
FULL_SIGNATURE_SIZE = 32


def sign_path(key: bytes, salt: bytes, path: str, signature_size: int = 0) -> str:
    """
    Compute the signature for an already serialized path.

    Args:
        key: Raw signing key
        salt: Raw signing salt
        path: Serialized path, including its leading "/"
        signature_size: Bytes of the digest to keep; 0 keeps all 32

    Returns:
        URL-safe base64 signature without padding
    """
    mac = hmac.new(key, digestmod=hashlib.sha256)
    mac.update(salt)
    mac.update(path.encode("utf-8"))

    size = signature_size or FULL_SIGNATURE_SIZE
    return b64encode_url(mac.digest()[:size])


def signature_for(
    key: Optional[bytes],
    salt: Optional[bytes],
    path: str,
    signature_size: int = 0,
) -> str:
    """Signature for path, or "insecure" when key or salt is missing."""
    if not key or not salt:
        logger.debug("No signing key/salt configured, producing insecure URL")
        return INSECURE_SIGNATURE

    logger.debug(
        "Signing path with %s-byte signature",
        signature_size or FULL_SIGNATURE_SIZE,
    )
    return sign_path(key, salt, path, signature_size)
