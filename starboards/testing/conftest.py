"""
Pytest plugin for starboards testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest when this package is installed.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["starboards.testing.conftest"]

Or import the fixtures directly:

    from starboards.testing.fixtures import mock_platform, sample_message
"""

# Re-export all fixtures for pytest auto-discovery
from starboards.testing.fixtures import (
    memory_storage,
    mock_platform,
    sample_channel,
    sample_message,
    sample_user,
    storage_path,
)

__all__ = [
    "mock_platform",
    "memory_storage",
    "storage_path",
    "sample_channel",
    "sample_message",
    "sample_user",
]
