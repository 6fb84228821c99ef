"""
Vote aggregation and threshold evaluation.

The aggregator keeps no counters. Every decision reads the live reaction
state of the message through the platform client, so reordered or replayed
packets cannot make a count drift.
"""

from starboards.emitter import EventEmitter
from starboards.logging import log_packet_discarded
from starboards.normalizer import TRANSIENT_ERRORS
from starboards.platform import PlatformClient
from starboards.types.entities import Message, User
from starboards.types.events import (
    ReactionAdded,
    ReactionKind,
    ReactionRemoved,
    ReactionsCleared,
    ResolvedContext,
    StarboardEvent,
)
from starboards.types.starboards import StarboardConfig

ReactionPayload = ReactionAdded | ReactionRemoved | ReactionsCleared


class VoteAggregator:
    """Applies starboard voting policy and publishes reaction events."""

    def __init__(self, client: PlatformClient, emitter: EventEmitter) -> None:
        self.client = client
        self.emitter = emitter

    async def count_votes(self, config: StarboardConfig, message: Message) -> int:
        """
        Live vote count of ``message`` for ``config``.

        The author's own reaction is left out unless the starboard allows
        self-stars.
        """
        exclude = None if config.options.self_star else message.author.id
        return await self.client.count_reactors(message, config.emoji, exclude_user_id=exclude)

    def is_eligible(self, config: StarboardConfig, message: Message) -> bool:
        """Whether votes on ``message`` can bring it to the starboard."""
        return config.options.star_bot_msg or not message.author.bot

    async def on_reaction_add(
        self, config: StarboardConfig, message: Message, user: User
    ) -> ReactionAdded:
        """
        Handle a vote.

        Every vote is published. Self-stars on a starboard that disallows
        them, and votes on bot messages on a starboard that does not star bot
        messages, are published with ``counted=False``; the latter never
        reach the threshold.
        """
        count = await self.count_votes(config, message)
        eligible = self.is_eligible(config, message)
        payload = ReactionAdded(
            config=config,
            emoji=config.emoji,
            message=message,
            user=user,
            count=count,
            counted=eligible and (config.options.self_star or user.id != message.author.id),
            threshold_reached=eligible and count >= config.options.threshold,
        )
        self.emitter.emit(StarboardEvent.REACTION_ADD, payload)
        return payload

    async def on_reaction_remove(
        self, config: StarboardConfig, message: Message, user: User
    ) -> ReactionRemoved:
        """Handle a withdrawn vote. Always published."""
        count = await self.count_votes(config, message)
        payload = ReactionRemoved(
            config=config,
            emoji=config.emoji,
            message=message,
            user=user,
            count=count,
            threshold_reached=self.is_eligible(config, message) and count >= config.options.threshold,
        )
        self.emitter.emit(StarboardEvent.REACTION_REMOVE, payload)
        return payload

    def on_reaction_remove_all(
        self, config: StarboardConfig, message: Message
    ) -> ReactionsCleared:
        payload = ReactionsCleared(config=config, message=message)
        self.emitter.emit(StarboardEvent.REACTION_REMOVE_ALL, payload)
        return payload

    async def process(self, context: ResolvedContext) -> ReactionPayload | None:
        """
        Dispatch a resolved context on its event kind.

        Returns:
            The published payload, or None if the live count could not be read
        """
        kind = context.event.kind
        if kind is ReactionKind.REMOVE_ALL:
            return self.on_reaction_remove_all(context.config, context.message)

        if context.user is None:
            log_packet_discarded(
                kind.value, "no user", context.message.channel_id, context.message.id
            )
            return None
        try:
            if kind is ReactionKind.ADD:
                return await self.on_reaction_add(context.config, context.message, context.user)
            return await self.on_reaction_remove(context.config, context.message, context.user)
        except TRANSIENT_ERRORS as e:
            log_packet_discarded(
                kind.value, f"count failed ({e})", context.message.channel_id, context.message.id
            )
            return None


__all__ = ["VoteAggregator", "ReactionPayload"]
