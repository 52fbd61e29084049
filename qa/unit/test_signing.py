"""
Unit tests for URL signing.

Tests:
- HMAC-SHA256 over salt + path
- Truncation and URL-safe base64 without padding
- Insecure mode without key or salt
"""

import base64
import hashlib
import hmac

import pytest

from imgproxy_url.signing import (
    INSECURE_SIGNATURE,
    sign_path,
    signature_for,
)

KEY = b"secret-key"
SALT = b"hello"
PATH = "/rs:fit:300:300/plain/http://img.example.com/pretty/image.jpg"


def _expected(key: bytes, salt: bytes, path: str, size: int = 32) -> str:
    digest = hmac.new(key, salt + path.encode(), hashlib.sha256).digest()[:size]
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode()


class TestSignPath:
    """Test signature computation."""

    def test_full_signature(self):
        signature = sign_path(KEY, SALT, PATH)
        assert signature == _expected(KEY, SALT, PATH)
        assert len(signature) == 43

    def test_zero_size_means_full(self):
        assert sign_path(KEY, SALT, PATH, 0) == sign_path(KEY, SALT, PATH, 32)

    @pytest.mark.parametrize("size,length", [(8, 11), (16, 22), (1, 2)])
    def test_truncated_signature(self, size, length):
        signature = sign_path(KEY, SALT, PATH, size)
        assert signature == _expected(KEY, SALT, PATH, size)
        assert len(signature) == length

    def test_truncation_is_prefix_of_digest(self):
        full = base64.urlsafe_b64decode(sign_path(KEY, SALT, PATH) + "=")
        short = base64.urlsafe_b64decode(sign_path(KEY, SALT, PATH, 8) + "=")
        assert full[:8] == short

    def test_reproducible(self):
        assert sign_path(KEY, SALT, PATH, 10) == sign_path(KEY, SALT, PATH, 10)

    def test_salt_changes_signature(self):
        assert sign_path(KEY, b"other", PATH) != sign_path(KEY, SALT, PATH)

    def test_url_safe_alphabet(self):
        signature = sign_path(KEY, SALT, PATH)
        assert "+" not in signature and "/" not in signature and "=" not in signature


class TestSignatureFor:
    """Test signed/insecure selection."""

    def test_signed_with_key_and_salt(self):
        assert signature_for(KEY, SALT, PATH) == sign_path(KEY, SALT, PATH)

    @pytest.mark.parametrize("key,salt", [
        (None, SALT),
        (KEY, None),
        (None, None),
        (b"", SALT),
        (KEY, b""),
    ])
    def test_insecure_without_material(self, key, salt):
        assert signature_for(key, salt, PATH) == INSECURE_SIGNATURE == "insecure"
