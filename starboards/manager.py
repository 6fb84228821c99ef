"""
Starboards manager.

Wires the registry, the raw packet normalizer, the vote aggregator and the
event emitter around a platform client.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from starboards.aggregator import ReactionPayload, VoteAggregator
from starboards.emitter import EventEmitter, Listener, ListenerErrorCallback
from starboards.exceptions import ConfigurationError, NotFoundError
from starboards.logging import get_logger
from starboards.normalizer import RawEventNormalizer
from starboards.platform import PlatformClient, RawPacket, RawPacketSource
from starboards.registry import ChannelLike, StarboardRegistry
from starboards.storage import DEFAULT_STORAGE_PATH, StarboardStorage, resolve_storage
from starboards.types.events import CHANNEL_DELETE, StarboardEvent
from starboards.types.starboards import StarboardConfig, StarboardOptions

logger = get_logger()


class StarboardsManager:
    """
    Manages the starboards of a bot.

    Example:
        ```python
        manager = StarboardsManager(client, storage="./starboards.json")
        await manager.init()

        @manager.on("starboardReactionAdd")
        def on_vote(event):
            if event.threshold_reached:
                print(f"{event.message.id} reached {event.count} {event.emoji}")

        await manager.create(channel, {"threshold": 3, "selfStar": False})
        ```
    """

    def __init__(
        self,
        client: PlatformClient,
        storage: "bool | str | Path | StarboardStorage" = DEFAULT_STORAGE_PATH,
        on_listener_error: ListenerErrorCallback | None = None,
        defaults_options: StarboardOptions | Mapping[str, Any] | None = None,
    ) -> None:
        """
        Initialize the manager.

        Args:
            client: Platform client used to resolve channels, messages and users.
                If it is also a RawPacketSource, the manager subscribes to its packets.
            storage: Path of the storage file, True for the default file,
                False to disable persistence, or a StarboardStorage backend
            on_listener_error: Optional callback ``(event, listener, exc)`` invoked
                when a listener raises
            defaults_options: Defaults that ``create`` merges options over

        Raises:
            ConfigurationError: If no client is given
            ValidationError: If ``defaults_options`` is out of range
        """
        if client is None:
            raise ConfigurationError("Client is a required parameter.")

        self.client = client
        self.storage = resolve_storage(storage)
        self.defaults_options = StarboardOptions.merge(defaults_options)

        self.emitter = EventEmitter(on_listener_error=on_listener_error)
        self.registry = StarboardRegistry(self.storage, self.emitter, self.defaults_options)
        self.normalizer = RawEventNormalizer(self.registry, client)
        self.aggregator = VoteAggregator(client, self.emitter)

        if isinstance(client, RawPacketSource):
            client.add_raw_listener(self.handle_raw)

    @property
    def starboards(self) -> list[StarboardConfig]:
        """Starboards managed by this manager."""
        return self.registry.starboards

    async def init(self) -> list[StarboardConfig]:
        """
        Load the starboards from storage.

        Raises:
            StorageFormatError: If the storage content is malformed
        """
        return await self.registry.load_all()

    async def __aenter__(self) -> "StarboardsManager":
        await self.init()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.emitter.drain()

    async def create(
        self,
        channel: ChannelLike,
        options: StarboardOptions | Mapping[str, Any] | None = None,
    ) -> StarboardConfig:
        """
        Create a starboard and save it.

        Raises:
            DuplicateStarboardError: If the channel already has a starboard with that emoji
        """
        return await self.registry.register(channel, options)

    async def delete(self, channel_id: str, emoji: str | None = None) -> StarboardConfig:
        """
        Delete the starboard(s) of a channel.

        Raises:
            NotFoundError: If the channel is not a starboard
        """
        return await self.registry.unregister(channel_id, emoji)

    def on(self, event: "StarboardEvent | str", listener: Listener | None = None) -> Any:
        """Register a listener; usable as ``manager.on(event, fn)`` or ``@manager.on(event)``."""
        if listener is None:
            return lambda fn: self.emitter.on(event, fn)
        return self.emitter.on(event, listener)

    def once(self, event: "StarboardEvent | str", listener: Listener) -> Listener:
        return self.emitter.once(event, listener)

    def off(self, event: "StarboardEvent | str", listener: Listener) -> None:
        self.emitter.off(event, listener)

    async def handle_raw(self, packet: RawPacket) -> list[ReactionPayload]:
        """
        Process one raw gateway packet.

        Never raises: irrelevant packets and unresolvable entities are
        discarded, unexpected failures are logged.

        Returns:
            The payloads published for this packet
        """
        if not isinstance(packet, Mapping):
            return []

        try:
            if packet.get("t") == CHANNEL_DELETE:
                data = packet.get("d") or {}
                if data.get("id") is not None:
                    await self.handle_channel_delete(str(data["id"]))
                return []

            published: list[ReactionPayload] = []
            for context in await self.normalizer.normalize(packet):
                payload = await self.aggregator.process(context)
                if payload is not None:
                    published.append(payload)
            return published
        except Exception:
            logger.exception("Failed to process %s packet", packet.get("t"))
            return []

    async def handle_channel_delete(self, channel_id: str) -> list[StarboardConfig]:
        """Delete the starboards of a channel deleted upstream, if any."""
        configs = self.registry.find_all_by_channel(channel_id)
        if not configs:
            return []

        try:
            await self.registry.unregister(channel_id)
        except NotFoundError:
            # deleted concurrently
            return []
        return configs


__all__ = ["StarboardsManager"]
