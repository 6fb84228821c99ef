"""Starboards type definitions.

This module exports all data model types used by the library.
"""

from starboards.types.entities import Channel, Emoji, Message, Reaction, User, emoji_key, same_emoji
from starboards.types.events import (
    CHANNEL_DELETE,
    MESSAGE_REACTION_ADD,
    MESSAGE_REACTION_REMOVE,
    MESSAGE_REACTION_REMOVE_ALL,
    ReactionAdded,
    ReactionEvent,
    ReactionKind,
    ReactionRemoved,
    ReactionsCleared,
    ResolvedContext,
    StarboardCreated,
    StarboardDeleted,
    StarboardEvent,
)
from starboards.types.starboards import StarboardConfig, StarboardOptions

__all__ = [
    # Platform entities
    "Channel",
    "Emoji",
    "Message",
    "Reaction",
    "User",
    "emoji_key",
    "same_emoji",
    # Starboard configuration
    "StarboardConfig",
    "StarboardOptions",
    # Raw packets
    "MESSAGE_REACTION_ADD",
    "MESSAGE_REACTION_REMOVE",
    "MESSAGE_REACTION_REMOVE_ALL",
    "CHANNEL_DELETE",
    "ReactionKind",
    "ReactionEvent",
    "ResolvedContext",
    # Domain events
    "StarboardEvent",
    "StarboardCreated",
    "StarboardDeleted",
    "ReactionAdded",
    "ReactionRemoved",
    "ReactionsCleared",
]
