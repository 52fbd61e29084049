"""
Pytest configuration for QA test suite.
"""

import sys
from pathlib import Path

import pytest

# Add repository root to Python path for test imports
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from imgproxy_url import reset_default  # noqa: E402

# Reference signing material
TEST_KEY = "e99bd6542067de7dac460558ecada3987dd2d18b066180eaa1c3abc66fb22e463d177ac8f64c93c44d0d78c35adcdda7e0b5f5a116b23ac3d1fa7a305d0727c4"
TEST_SALT = "a997d51b78d28ba8c05f39b6e634a044b9551352b105f70a4c0fc4c0eca5982719a33527d0253810273bf4d8b747a261cd4898d3e46916cc57d1de8aac132870"


# Configure pytest
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "e2e: marks tests as end-to-end URL scenarios"
    )


@pytest.fixture(autouse=True)
def clean_default():
    """Every test starts and ends with an unconfigured process-wide default."""
    reset_default()
    yield
    reset_default()


@pytest.fixture
def hex_key():
    return TEST_KEY


@pytest.fixture
def hex_salt():
    return TEST_SALT


@pytest.fixture
def signing_env():
    """Environment mapping carrying the reference key and salt."""
    return {"IMGPROXY_KEY": TEST_KEY, "IMGPROXY_SALT": TEST_SALT}
