"""
Starboard registry.

Holds the configured starboards in memory and mirrors every change to the
storage backend with a full-list overwrite. Mutations are serialized so that
concurrent ``register``/``unregister`` calls never interleave their
read-modify-write of the list and the store.
"""

import asyncio
from collections.abc import Mapping
from typing import Any, Protocol

from starboards.emitter import EventEmitter
from starboards.exceptions import DuplicateStarboardError, NotFoundError
from starboards.logging import get_logger
from starboards.storage import StarboardStorage
from starboards.types.entities import Emoji, same_emoji
from starboards.types.events import StarboardCreated, StarboardDeleted, StarboardEvent
from starboards.types.starboards import StarboardConfig, StarboardOptions

logger = get_logger()


class ChannelLike(Protocol):
    id: Any
    guild_id: Any


class StarboardRegistry:
    """In-memory list of starboards backed by a :class:`StarboardStorage`."""

    def __init__(
        self,
        storage: StarboardStorage,
        emitter: EventEmitter | None = None,
        defaults: StarboardOptions | None = None,
    ) -> None:
        """
        Initialize the registry.

        Args:
            storage: Backend receiving a full-list overwrite on every mutation
            emitter: Emitter for ``starboardCreate``/``starboardDelete``
            defaults: Options that unset or mistyped fields fall back to
        """
        self.storage = storage
        self.defaults = defaults if defaults is not None else StarboardOptions()
        self.emitter = emitter if emitter is not None else EventEmitter()
        self._starboards: list[StarboardConfig] = []
        self._lock = asyncio.Lock()

    @property
    def starboards(self) -> list[StarboardConfig]:
        """Snapshot of the configured starboards."""
        return list(self._starboards)

    async def load_all(self) -> list[StarboardConfig]:
        """
        Load the starboards from storage, replacing the in-memory list.

        An empty store is initialized with an empty list.

        Raises:
            StorageFormatError: If the stored content is malformed
        """
        async with self._lock:
            stored = await self.storage.load()
            if stored is None:
                await self.storage.save_all([])
                stored = []
            self._starboards = list(stored)

        logger.info("Loaded %d starboard(s)", len(stored))
        return list(stored)

    async def register(
        self,
        channel: ChannelLike,
        options: StarboardOptions | Mapping[str, Any] | None = None,
    ) -> StarboardConfig:
        """
        Create a starboard on ``channel`` and persist it.

        Args:
            channel: The channel (anything with ``id`` and ``guild_id``)
            options: Options merged over the defaults

        Returns:
            The created StarboardConfig

        Raises:
            DuplicateStarboardError: If the channel already has a starboard for the
                same emoji, in any of its spellings
            ValidationError: If an option value is out of range
        """
        config = StarboardConfig(
            channel_id=str(channel.id),
            guild_id=str(channel.guild_id) if channel.guild_id is not None else None,
            options=StarboardOptions.merge(options, self.defaults),
        )

        async with self._lock:
            if any(existing.conflicts_with(config) for existing in self._starboards):
                raise DuplicateStarboardError(config.channel_id, config.emoji)

            updated = [*self._starboards, config]
            await self.storage.save_all(updated)
            self._starboards = updated

        logger.info("Created starboard in channel %s (%s)", config.channel_id, config.emoji)
        self.emitter.emit(StarboardEvent.CREATE, StarboardCreated(config))
        return config

    async def unregister(self, channel_id: str, emoji: str | None = None) -> StarboardConfig:
        """
        Delete the starboard(s) of a channel and persist the change.

        Args:
            channel_id: The starboard channel
            emoji: Only delete the starboard using this emoji (default: all of the channel)

        Returns:
            The first deleted StarboardConfig

        Raises:
            NotFoundError: If the channel has no matching starboard
        """
        channel_id = str(channel_id)

        async with self._lock:
            removed = [
                config
                for config in self._starboards
                if config.channel_id == channel_id
                and (emoji is None or same_emoji(config.emoji, emoji))
            ]
            if not removed:
                raise NotFoundError("NOT_FOUND", f'The channel "{channel_id}" is not a starboard')

            updated = [config for config in self._starboards if config not in removed]
            await self.storage.save_all(updated)
            self._starboards = updated

        for config in removed:
            logger.info("Deleted starboard in channel %s (%s)", config.channel_id, config.emoji)
            self.emitter.emit(StarboardEvent.DELETE, StarboardDeleted(config))
        return removed[0]

    def find_by_channel(self, channel_id: str) -> StarboardConfig | None:
        channel_id = str(channel_id)
        return next((c for c in self._starboards if c.channel_id == channel_id), None)

    def find_all_by_channel(self, channel_id: str) -> list[StarboardConfig]:
        channel_id = str(channel_id)
        return [c for c in self._starboards if c.channel_id == channel_id]

    def find_by_channel_and_emoji(
        self, channel_id: str, emoji: "str | Emoji"
    ) -> StarboardConfig | None:
        """Find the starboard of a channel watching ``emoji``, in any of its spellings."""
        for config in self.find_all_by_channel(channel_id):
            if isinstance(emoji, Emoji):
                if emoji.matches(config.emoji):
                    return config
            elif same_emoji(config.emoji, emoji):
                return config
        return None

    def __len__(self) -> int:
        return len(self._starboards)

    def __contains__(self, channel_id: object) -> bool:
        return any(c.channel_id == str(channel_id) for c in self._starboards)


__all__ = ["StarboardRegistry"]
