"""
Chat platform capabilities the starboard pipeline depends on.

The pipeline never talks to the platform directly: it goes through a
:class:`PlatformClient` (cache lookups, remote fetches, live reactor counts)
and, optionally, receives raw gateway packets from a :class:`RawPacketSource`.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from starboards.types.entities import Channel, Message, User

RawPacket = Mapping[str, Any]
RawListener = Callable[[RawPacket], Awaitable[None]]


class PlatformClient(ABC):
    """Abstract base class for platform clients."""

    @abstractmethod
    def get_channel(self, channel_id: str) -> Channel | None:
        """Return the cached channel, or None. Never performs I/O."""
        pass

    @abstractmethod
    async def fetch_channel(self, channel_id: str) -> Channel:
        """Fetch a channel from the platform."""
        pass

    @abstractmethod
    def get_message(self, channel_id: str, message_id: str) -> Message | None:
        """Return the cached message, or None. Never performs I/O."""
        pass

    @abstractmethod
    async def fetch_message(self, channel_id: str, message_id: str) -> Message:
        """Fetch a message (with its current reactions) from the platform."""
        pass

    @abstractmethod
    def get_user(self, user_id: str) -> User | None:
        """Return the cached user, or None. Never performs I/O."""
        pass

    @abstractmethod
    async def fetch_user(self, user_id: str) -> User:
        """Fetch a user from the platform."""
        pass

    @abstractmethod
    async def count_reactors(
        self, message: Message, emoji: str, exclude_user_id: str | None = None
    ) -> int:
        """
        Count the distinct users who reacted to ``message`` with ``emoji``.

        Args:
            message: The message whose live reaction state is read
            emoji: The configured starboard emoji
            exclude_user_id: A user whose reaction must not be counted
        """
        pass


@runtime_checkable
class RawPacketSource(Protocol):
    """Something that delivers raw gateway packets (``{"t": ..., "d": ...}``)."""

    def add_raw_listener(self, listener: RawListener) -> None: ...


__all__ = ["PlatformClient", "RawPacketSource", "RawPacket", "RawListener"]
