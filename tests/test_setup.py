"""
Verify project setup is correct.
"""

import horizon


def test_version_exists():
    """Package has version."""
    assert hasattr(horizon, "__version__")
    assert horizon.__version__ == "0.1.0"


def test_public_api_exported():
    """Top-level package re-exports the main entry points."""
    for name in horizon.__all__:
        assert hasattr(horizon, name)
