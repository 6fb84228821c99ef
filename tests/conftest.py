"""Shared fixtures for the starboards test suite."""

from starboards.testing.conftest import (  # noqa: F401
    memory_storage,
    mock_platform,
    sample_channel,
    sample_message,
    sample_user,
    storage_path,
)
