"""Raw reaction events and the domain events published to subscribers."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from starboards.types.entities import Channel, Emoji, Message, User
from starboards.types.starboards import StarboardConfig

MESSAGE_REACTION_ADD = "MESSAGE_REACTION_ADD"
MESSAGE_REACTION_REMOVE = "MESSAGE_REACTION_REMOVE"
MESSAGE_REACTION_REMOVE_ALL = "MESSAGE_REACTION_REMOVE_ALL"
CHANNEL_DELETE = "CHANNEL_DELETE"


class ReactionKind(Enum):
    ADD = MESSAGE_REACTION_ADD
    REMOVE = MESSAGE_REACTION_REMOVE
    REMOVE_ALL = MESSAGE_REACTION_REMOVE_ALL


@dataclass(frozen=True)
class ReactionEvent:
    """A reaction packet reduced to the fields the pipeline consumes."""

    kind: ReactionKind
    channel_id: str
    message_id: str
    user_id: str | None = None  # None for REMOVE_ALL
    emoji: Emoji | None = None  # None for REMOVE_ALL
    guild_id: str | None = None

    @classmethod
    def from_packet(cls, packet: Mapping[str, Any]) -> "ReactionEvent | None":
        """
        Build an event from a raw ``{"t": ..., "d": ...}`` gateway packet.

        Returns None for packets that are not reaction packets or that lack
        the fields their type requires.
        """
        try:
            kind = ReactionKind(packet.get("t"))
        except ValueError:
            return None

        data = packet.get("d")
        if not isinstance(data, Mapping):
            return None

        channel_id = data.get("channel_id")
        message_id = data.get("message_id")
        if channel_id is None or message_id is None:
            return None

        guild_id = data.get("guild_id")
        if kind is ReactionKind.REMOVE_ALL:
            return cls(
                kind=kind,
                channel_id=str(channel_id),
                message_id=str(message_id),
                guild_id=str(guild_id) if guild_id is not None else None,
            )

        user_id = data.get("user_id")
        emoji = data.get("emoji")
        if user_id is None or not isinstance(emoji, Mapping):
            return None

        return cls(
            kind=kind,
            channel_id=str(channel_id),
            message_id=str(message_id),
            user_id=str(user_id),
            emoji=Emoji.from_dict(dict(emoji)),
            guild_id=str(guild_id) if guild_id is not None else None,
        )


@dataclass(frozen=True)
class ResolvedContext:
    """Everything needed to aggregate one reaction event. Never retained."""

    event: ReactionEvent
    config: StarboardConfig
    channel: Channel
    message: Message
    user: User | None = None


@dataclass(frozen=True)
class StarboardCreated:
    config: StarboardConfig


@dataclass(frozen=True)
class StarboardDeleted:
    config: StarboardConfig


@dataclass(frozen=True)
class ReactionAdded:
    """
    A vote was observed on a message of a starboard channel.

    ``count`` is the live number of distinct users who reacted with the
    starboard emoji, excluding the author when self-stars are disabled.
    ``counted`` is False for a self-star on a starboard that disallows them:
    the event is informational and the vote is not part of ``count``.
    """

    config: StarboardConfig
    emoji: str
    message: Message
    user: User
    count: int
    counted: bool
    threshold_reached: bool


@dataclass(frozen=True)
class ReactionRemoved:
    config: StarboardConfig
    emoji: str
    message: Message
    user: User
    count: int
    threshold_reached: bool


@dataclass(frozen=True)
class ReactionsCleared:
    config: StarboardConfig
    message: Message


class StarboardEvent(Enum):
    """Domain events published by the manager."""

    CREATE = "starboardCreate"
    DELETE = "starboardDelete"
    REACTION_ADD = "starboardReactionAdd"
    REACTION_REMOVE = "starboardReactionRemove"
    REACTION_REMOVE_ALL = "starboardReactionRemoveAll"

    @property
    def payload_type(self) -> type:
        return _PAYLOAD_TYPES[self]


_PAYLOAD_TYPES: dict[StarboardEvent, type] = {
    StarboardEvent.CREATE: StarboardCreated,
    StarboardEvent.DELETE: StarboardDeleted,
    StarboardEvent.REACTION_ADD: ReactionAdded,
    StarboardEvent.REACTION_REMOVE: ReactionRemoved,
    StarboardEvent.REACTION_REMOVE_ALL: ReactionsCleared,
}
