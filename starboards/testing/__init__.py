"""Starboards testing utilities.

Provides a mock platform client, packet builders and fixtures for testing
applications that use starboards.
"""

from starboards.testing.fixtures import (
    create_mock_channel,
    create_mock_message,
    create_mock_user,
    make_channel_delete_packet,
    make_reaction_packet,
    make_remove_all_packet,
)
from starboards.testing.mock import MockCall, MockPlatformClient

__all__ = [
    # Mock client
    "MockPlatformClient",
    "MockCall",
    # Entity factories
    "create_mock_user",
    "create_mock_channel",
    "create_mock_message",
    # Packet builders
    "make_reaction_packet",
    "make_remove_all_packet",
    "make_channel_delete_packet",
]
