"""
Factories and pytest fixtures for testing starboards integrations.
"""

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from starboards.storage import MemoryStorage
from starboards.testing.mock import MockPlatformClient
from starboards.types.entities import Channel, Emoji, Message, Reaction, User
from starboards.types.events import (
    CHANNEL_DELETE,
    MESSAGE_REACTION_ADD,
    MESSAGE_REACTION_REMOVE,
    MESSAGE_REACTION_REMOVE_ALL,
)

MOCK_GUILD_ID = "300000000000000000"
MOCK_CHANNEL_ID = "200000000000000000"
MOCK_MESSAGE_ID = "400000000000000000"
MOCK_USER_ID = "100000000000000000"


# ============================================================================
# Factories
# ============================================================================


def create_mock_user(
    user_id: str = MOCK_USER_ID,
    username: str = "mock-user",
    bot: bool = False,
) -> User:
    """Create a User with sensible defaults."""
    return User(id=user_id, username=username, bot=bot)


def create_mock_channel(
    channel_id: str = MOCK_CHANNEL_ID,
    guild_id: str | None = MOCK_GUILD_ID,
    name: str = "general",
) -> Channel:
    """Create a Channel with sensible defaults."""
    return Channel(id=channel_id, guild_id=guild_id, name=name)


def create_mock_message(
    message_id: str = MOCK_MESSAGE_ID,
    channel_id: str = MOCK_CHANNEL_ID,
    author: User | None = None,
    guild_id: str | None = MOCK_GUILD_ID,
    content: str = "hello",
    reactions: list[Reaction] | None = None,
) -> Message:
    """Create a Message with sensible defaults."""
    return Message(
        id=message_id,
        channel_id=channel_id,
        author=author if author is not None else create_mock_user(username="author"),
        guild_id=guild_id,
        content=content,
        reactions=list(reactions) if reactions is not None else [],
    )


def _emoji_payload(emoji: "Emoji | str") -> dict[str, Any]:
    if isinstance(emoji, Emoji):
        return {"name": emoji.name, "id": emoji.id, "animated": emoji.animated}
    return {"name": emoji, "id": None}


def make_reaction_packet(
    removed: bool = False,
    channel_id: str = MOCK_CHANNEL_ID,
    message_id: str = MOCK_MESSAGE_ID,
    user_id: str = MOCK_USER_ID,
    emoji: "Emoji | str" = "⭐",
    guild_id: str | None = MOCK_GUILD_ID,
) -> dict[str, Any]:
    """Build a raw MESSAGE_REACTION_ADD (or _REMOVE) gateway packet."""
    data: dict[str, Any] = {
        "channel_id": channel_id,
        "message_id": message_id,
        "user_id": user_id,
        "emoji": _emoji_payload(emoji),
    }
    if guild_id is not None:
        data["guild_id"] = guild_id
    return {"t": MESSAGE_REACTION_REMOVE if removed else MESSAGE_REACTION_ADD, "d": data}


def make_remove_all_packet(
    channel_id: str = MOCK_CHANNEL_ID,
    message_id: str = MOCK_MESSAGE_ID,
    guild_id: str | None = MOCK_GUILD_ID,
) -> dict[str, Any]:
    """Build a raw MESSAGE_REACTION_REMOVE_ALL gateway packet."""
    data: dict[str, Any] = {"channel_id": channel_id, "message_id": message_id}
    if guild_id is not None:
        data["guild_id"] = guild_id
    return {"t": MESSAGE_REACTION_REMOVE_ALL, "d": data}


def make_channel_delete_packet(
    channel_id: str = MOCK_CHANNEL_ID,
    guild_id: str | None = MOCK_GUILD_ID,
) -> dict[str, Any]:
    """Build a raw CHANNEL_DELETE gateway packet."""
    return {"t": CHANNEL_DELETE, "d": {"id": channel_id, "guild_id": guild_id, "type": 0}}


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_platform() -> Generator[MockPlatformClient, None, None]:
    """
    Provide a MockPlatformClient for testing.

    Example:
        ```python
        def test_no_fetch(mock_platform):
            manager = StarboardsManager(mock_platform, storage=False)
            asyncio.run(manager.handle_raw(make_reaction_packet()))
            assert mock_platform.fetch_count == 0
        ```
    """
    client = MockPlatformClient()
    yield client
    client.reset()


@pytest.fixture
def memory_storage() -> MemoryStorage:
    """Provide an empty in-memory storage backend."""
    return MemoryStorage()


@pytest.fixture
def storage_path(tmp_path: Path) -> Path:
    """Provide a path for a storage file that does not exist yet."""
    return tmp_path / "starboards.json"


@pytest.fixture
def sample_channel() -> Channel:
    return create_mock_channel()


@pytest.fixture
def sample_user() -> User:
    return create_mock_user()


@pytest.fixture
def sample_message() -> Message:
    return create_mock_message(author=create_mock_user(user_id="999", username="author"))
