"""
Raw reaction packet normalizer.

Turns raw gateway packets into resolved reaction contexts. Packets for
channels without a starboard, or with another emoji, are dropped before any
fetch is made; raw packets arrive for every channel the bot can see, so this
filter runs first and runs cheaply.
"""

import httpx

from starboards.exceptions import StarboardError
from starboards.logging import log_packet_discarded
from starboards.platform import PlatformClient, RawPacket
from starboards.registry import StarboardRegistry
from starboards.types.entities import Channel, Message, User
from starboards.types.events import ReactionEvent, ReactionKind, ResolvedContext
from starboards.types.starboards import StarboardConfig

# Deleted messages, unknown users, missing permissions: expected, not failures.
TRANSIENT_ERRORS: tuple[type[Exception], ...] = (StarboardError, httpx.HTTPError)


class RawEventNormalizer:
    """Filters raw reaction packets and resolves the entities they reference."""

    def __init__(self, registry: StarboardRegistry, client: PlatformClient) -> None:
        self.registry = registry
        self.client = client

    def match(self, event: ReactionEvent) -> list[StarboardConfig]:
        """
        Return the starboards an event is relevant to. Performs no I/O.

        Add/remove events match at most the one starboard of the channel using
        the event's emoji; remove-all events match every starboard of the channel.
        """
        configs = self.registry.find_all_by_channel(event.channel_id)
        if not configs:
            log_packet_discarded(event.kind.value, "no starboard", event.channel_id)
            return []

        if event.kind is ReactionKind.REMOVE_ALL:
            return configs

        if event.emoji is None:
            log_packet_discarded(event.kind.value, "no emoji", event.channel_id)
            return []
        config = self.registry.find_by_channel_and_emoji(event.channel_id, event.emoji)
        if config is None:
            log_packet_discarded(
                event.kind.value, f"emoji {event.emoji} is not a starboard emoji", event.channel_id
            )
            return []
        return [config]

    async def normalize(self, packet: RawPacket) -> list[ResolvedContext]:
        """
        Normalize a raw packet.

        Returns:
            One context per matching starboard; empty when the packet is
            irrelevant or its entities cannot be resolved
        """
        event = ReactionEvent.from_packet(packet)
        if event is None:
            return []

        configs = self.match(event)
        if not configs:
            return []

        if event.kind is not ReactionKind.REMOVE_ALL and event.user_id is None:
            log_packet_discarded(event.kind.value, "no user", event.channel_id, event.message_id)
            return []

        try:
            channel = await self.resolve_channel(event.channel_id)
            message = await self.resolve_message(event.channel_id, event.message_id)
            user = None
            if event.user_id is not None and event.kind is not ReactionKind.REMOVE_ALL:
                user = await self.resolve_user(event.user_id)
        except TRANSIENT_ERRORS as e:
            log_packet_discarded(
                event.kind.value, f"resolution failed ({e})", event.channel_id, event.message_id
            )
            return []

        return [
            ResolvedContext(event=event, config=config, channel=channel, message=message, user=user)
            for config in configs
        ]

    async def resolve_channel(self, channel_id: str) -> Channel:
        channel = self.client.get_channel(channel_id)
        if channel is None:
            channel = await self.client.fetch_channel(channel_id)
        return channel

    async def resolve_message(self, channel_id: str, message_id: str) -> Message:
        message = self.client.get_message(channel_id, message_id)
        if message is None:
            message = await self.client.fetch_message(channel_id, message_id)
        return message

    async def resolve_user(self, user_id: str) -> User:
        user = self.client.get_user(user_id)
        if user is None:
            user = await self.client.fetch_user(user_id)
        return user


__all__ = ["RawEventNormalizer", "TRANSIENT_ERRORS"]
