"""
REST-backed platform client.

Resolves channels, messages and users through the Discord HTTP API. Channels
and users are cached once fetched. Messages are never cached: their reaction
state changes with every vote, and a stale copy would make counts drift.
"""

import os
from typing import Any
from urllib.parse import quote

import httpx

from starboards.exceptions import ConfigurationError
from starboards.platform import PlatformClient
from starboards.transport import DEFAULT_API_BASE_URL, RESTTransport, RetryConfig
from starboards.types.entities import Channel, Emoji, Message, User

REACTORS_PAGE_SIZE = 100


class RESTPlatformClient(PlatformClient):
    """
    Platform client for the Discord HTTP API.

    Example:
        ```python
        import asyncio
        from starboards import RESTPlatformClient, StarboardsManager

        async def main():
            async with RESTPlatformClient.from_env() as client:
                manager = StarboardsManager(client, storage="./starboards.json")
                await manager.init()
                # feed gateway packets: await manager.handle_raw(packet)

        asyncio.run(main())
        ```
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the REST client.

        Args:
            token: Bot token
            base_url: Base URL for API requests (default: Discord API v10)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            transport: Custom httpx transport (optional, for tests)

        Raises:
            ConfigurationError: If no token is given
        """
        if not token:
            raise ConfigurationError("A bot token is required")

        self._transport = RESTTransport(
            token=token,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
            transport=transport,
        )
        self._channels: dict[str, Channel] = {}
        self._users: dict[str, User] = {}

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> "RESTPlatformClient":
        """
        Create a client from environment variables.

        Environment variables:
            DISCORD_TOKEN: Bot token (required)
            DISCORD_API_BASE_URL: Base URL for the API (optional)

        Raises:
            ConfigurationError: If DISCORD_TOKEN is not set
        """
        token = os.environ.get("DISCORD_TOKEN")
        base_url = os.environ.get("DISCORD_API_BASE_URL", DEFAULT_API_BASE_URL)

        if not token:
            raise ConfigurationError("DISCORD_TOKEN environment variable not set")

        return cls(token=token, base_url=base_url, timeout=timeout, retry_config=retry_config)

    @property
    def transport(self) -> RESTTransport:
        """Get the underlying REST transport (for advanced use cases)."""
        return self._transport

    def get_channel(self, channel_id: str) -> Channel | None:
        return self._channels.get(str(channel_id))

    async def fetch_channel(self, channel_id: str) -> Channel:
        data = await self._transport.get(f"/channels/{channel_id}")
        channel = Channel.from_dict(data)
        self._channels[channel.id] = channel
        return channel

    def get_message(self, channel_id: str, message_id: str) -> Message | None:
        return None

    async def fetch_message(self, channel_id: str, message_id: str) -> Message:
        data: dict[str, Any] = await self._transport.get(
            f"/channels/{channel_id}/messages/{message_id}"
        )
        if data.get("guild_id") is None:
            channel = self._channels.get(str(channel_id))
            if channel is not None:
                data = {**data, "guild_id": channel.guild_id}
        message = Message.from_dict(data)
        self._users.setdefault(message.author.id, message.author)
        return message

    def get_user(self, user_id: str) -> User | None:
        return self._users.get(str(user_id))

    async def fetch_user(self, user_id: str) -> User:
        data = await self._transport.get(f"/users/{user_id}")
        user = User.from_dict(data)
        self._users[user.id] = user
        return user

    async def count_reactors(
        self, message: Message, emoji: str, exclude_user_id: str | None = None
    ) -> int:
        """
        Count distinct reactors.

        Uses the reaction count carried by the message when nobody is
        excluded, otherwise lists the reactors.
        """
        reaction = message.reaction_for(emoji)
        if reaction is None:
            return 0
        if exclude_user_id is None:
            return reaction.count

        reactors = await self.fetch_reactor_ids(message, reaction.emoji)
        reactors.discard(str(exclude_user_id))
        return len(reactors)

    async def fetch_reactor_ids(self, message: Message, emoji: Emoji) -> set[str]:
        """List the ids of every user who reacted to ``message`` with ``emoji``."""
        emoji_path = quote(f"{emoji.name}:{emoji.id}" if emoji.is_custom else emoji.name or "", safe=":")
        path = f"/channels/{message.channel_id}/messages/{message.id}/reactions/{emoji_path}"

        reactors: set[str] = set()
        after: str | None = None
        while True:
            params: dict[str, Any] = {"limit": REACTORS_PAGE_SIZE}
            if after is not None:
                params["after"] = after
            page = await self._transport.get(path, params=params)
            for entry in page:
                user = User.from_dict(entry)
                self._users.setdefault(user.id, user)
                reactors.add(user.id)
            if len(page) < REACTORS_PAGE_SIZE:
                return reactors
            after = str(page[-1]["id"])

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "RESTPlatformClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


__all__ = ["RESTPlatformClient"]
