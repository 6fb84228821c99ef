"""Platform entity models.

Only the fields the reaction pipeline reads are modelled.
"""

import re
from dataclasses import dataclass, field
from typing import Any

_VARIATION_SELECTOR = "\ufe0f"
_MENTION = re.compile(r"<(a?):(\w+):([0-9]+)>")
_NAME_ID = re.compile(r"(\w+):([0-9]+)")
_SNOWFLAKE = re.compile(r"[0-9]+")
_CUSTOM_NAME = re.compile(r"\w+")


def _snowflake(value: Any) -> str | None:
    return str(value) if value is not None else None


@dataclass(frozen=True)
class Emoji:
    """A unicode emoji (``id`` is None) or a custom guild emoji."""

    name: str | None
    id: str | None = None
    animated: bool = False

    @property
    def identifier(self) -> str:
        """The custom emoji id, or the unicode name."""
        return self.id if self.id else (self.name or "")

    @property
    def is_custom(self) -> bool:
        return self.id is not None

    def matches(self, configured: str) -> bool:
        """
        Check whether a configured starboard emoji designates this emoji.

        Unicode emoji compare by name, ignoring variation selectors. Custom
        emoji match their id, their bare name, ``name:id`` or the
        ``<:name:id>`` / ``<a:name:id>`` mention form.
        """
        if not self.is_custom:
            if self.name is None:
                return False
            return configured.replace(_VARIATION_SELECTOR, "") == self.name.replace(_VARIATION_SELECTOR, "")

        return configured in {
            self.id,
            self.name,
            f"{self.name}:{self.id}",
            f"<:{self.name}:{self.id}>",
            f"<a:{self.name}:{self.id}>",
        }

    @classmethod
    def parse(cls, configured: str) -> "Emoji":
        """
        Parse a configured starboard emoji.

        ``<:name:id>``, ``<a:name:id>`` and ``name:id`` give a custom emoji with
        both parts, a bare snowflake gives a custom emoji known by id only, and
        anything else is a name with variation selectors removed.
        """
        mention = _MENTION.fullmatch(configured)
        if mention:
            return cls(name=mention.group(2), id=mention.group(3), animated=bool(mention.group(1)))
        name_id = _NAME_ID.fullmatch(configured)
        if name_id:
            return cls(name=name_id.group(1), id=name_id.group(2))
        if _SNOWFLAKE.fullmatch(configured):
            return cls(name=None, id=configured)
        return cls(name=configured.replace(_VARIATION_SELECTOR, ""))

    def __str__(self) -> str:
        if self.is_custom:
            prefix = "a" if self.animated else ""
            return f"<{prefix}:{self.name}:{self.id}>"
        return self.name or ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Emoji":
        """Build from a gateway/REST emoji object (``{name, id, animated}``)."""
        return cls(
            name=data.get("name"),
            id=_snowflake(data.get("id")),
            animated=bool(data.get("animated", False)),
        )


def same_emoji(configured: str, other: str) -> bool:
    """
    Check whether two configured emoji strings designate the same emoji.

    Custom emoji compare by id when both strings carry one, otherwise by name.
    A bare id collides with any bare name that is a valid custom emoji name,
    since a reaction with that id and name matches both.
    """
    a, b = Emoji.parse(configured), Emoji.parse(other)
    if a.id and b.id:
        return a.id == b.id
    if a.name and b.name:
        return a.name == b.name
    name = a.name or b.name
    return bool(name and _CUSTOM_NAME.fullmatch(name))


def emoji_key(configured: str) -> str:
    """Canonical form of a configured emoji: the custom id, else the name."""
    return Emoji.parse(configured).identifier


@dataclass(frozen=True)
class User:
    """A platform user."""

    id: str
    username: str = ""
    bot: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=str(data["id"]),
            username=data.get("username", ""),
            bot=bool(data.get("bot", False)),
        )


@dataclass(frozen=True)
class Channel:
    """A guild text channel."""

    id: str
    guild_id: str | None = None
    name: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Channel":
        return cls(
            id=str(data["id"]),
            guild_id=_snowflake(data.get("guild_id")),
            name=data.get("name"),
        )


@dataclass(frozen=True)
class Reaction:
    """Aggregated reaction state for one emoji on a message."""

    emoji: Emoji
    count: int
    me: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Reaction":
        return cls(
            emoji=Emoji.from_dict(data.get("emoji", {})),
            count=int(data.get("count", 0)),
            me=bool(data.get("me", False)),
        )


@dataclass
class Message:
    """A channel message with its live reaction state."""

    id: str
    channel_id: str
    author: User
    guild_id: str | None = None
    content: str = ""
    reactions: list[Reaction] = field(default_factory=list)

    def reaction_for(self, emoji: str) -> Reaction | None:
        """Return the reaction matching a configured emoji, if any."""
        for reaction in self.reactions:
            if reaction.emoji.matches(emoji):
                return reaction
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        return cls(
            id=str(data["id"]),
            channel_id=str(data["channel_id"]),
            author=User.from_dict(data["author"]),
            guild_id=_snowflake(data.get("guild_id")),
            content=data.get("content", ""),
            reactions=[Reaction.from_dict(r) for r in data.get("reactions", [])],
        )
