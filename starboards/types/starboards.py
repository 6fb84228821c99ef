"""Starboard configuration models."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from starboards.exceptions import StorageFormatError, ValidationError
from starboards.types.entities import emoji_key, same_emoji

DEFAULT_EMOJI = "⭐"
DEFAULT_THRESHOLD = 5

# snake_case name -> camelCase name used in the storage file
_OPTION_ALIASES = {
    "emoji": "emoji",
    "threshold": "threshold",
    "self_star": "selfStar",
    "star_bot_msg": "starBotMsg",
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class StarboardOptions:
    """Per-starboard voting options."""

    emoji: str = DEFAULT_EMOJI
    threshold: int = DEFAULT_THRESHOLD
    self_star: bool = False
    star_bot_msg: bool = True

    @classmethod
    def merge(
        cls,
        options: "StarboardOptions | Mapping[str, Any] | None" = None,
        defaults: "StarboardOptions | None" = None,
    ) -> "StarboardOptions":
        """
        Merge user-supplied options over the defaults.

        A field is taken from ``options`` only when it has the expected type;
        anything else falls back to the default. Keys may be snake_case or
        camelCase (``selfStar``, ``starBotMsg``).

        Args:
            options: Options to merge
            defaults: Fallback values (default: the class defaults)

        Raises:
            ValidationError: If ``threshold`` is an integer below 1
        """
        if defaults is None:
            defaults = cls()
        if options is None:
            merged = defaults
        elif isinstance(options, StarboardOptions):
            merged = options
        else:
            values: dict[str, Any] = {}
            for attr, camel in _OPTION_ALIASES.items():
                value = options.get(attr, options.get(camel))
                default = getattr(defaults, attr)
                if attr == "threshold":
                    values[attr] = value if _is_int(value) else default
                elif isinstance(value, type(default)):
                    values[attr] = value
                else:
                    values[attr] = default
            merged = cls(**values)

        if merged.threshold < 1:
            raise ValidationError(
                "INVALID_THRESHOLD", f"threshold must be at least 1, got {merged.threshold}"
            )
        if not merged.emoji:
            raise ValidationError("INVALID_EMOJI", "emoji must not be empty")
        return merged

    def to_dict(self) -> dict[str, Any]:
        return {camel: getattr(self, attr) for attr, camel in _OPTION_ALIASES.items()}

    @classmethod
    def from_dict(cls, data: Any) -> "StarboardOptions":
        """Strict parse of the stored form."""
        if not isinstance(data, dict):
            raise StorageFormatError("starboard options must be an object")
        try:
            emoji = data["emoji"]
            threshold = data["threshold"]
            self_star = data["selfStar"]
            star_bot_msg = data["starBotMsg"]
        except KeyError as e:
            raise StorageFormatError(f"starboard options missing key {e}") from e

        if not isinstance(emoji, str) or not _is_int(threshold):
            raise StorageFormatError("starboard emoji/threshold have the wrong type")
        if not isinstance(self_star, bool) or not isinstance(star_bot_msg, bool):
            raise StorageFormatError("starboard selfStar/starBotMsg must be booleans")
        if threshold < 1:
            raise StorageFormatError(f"starboard threshold must be at least 1, got {threshold}")
        if not emoji:
            raise StorageFormatError("starboard emoji must not be empty")

        return cls(
            emoji=emoji,
            threshold=threshold,
            self_star=self_star,
            star_bot_msg=star_bot_msg,
        )


@dataclass(frozen=True)
class StarboardConfig:
    """A configured starboard channel."""

    channel_id: str
    guild_id: str | None
    options: StarboardOptions = field(default_factory=StarboardOptions)

    @property
    def emoji(self) -> str:
        return self.options.emoji

    @property
    def key(self) -> tuple[str, str]:
        """Uniqueness key: at most one starboard per (channel, emoji)."""
        return (self.channel_id, emoji_key(self.options.emoji))

    def conflicts_with(self, other: "StarboardConfig") -> bool:
        """Whether both starboards watch the same emoji on the same channel."""
        return self.channel_id == other.channel_id and same_emoji(self.emoji, other.emoji)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the storage file format."""
        return {
            "channelID": self.channel_id,
            "guildID": self.guild_id,
            "options": self.options.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "StarboardConfig":
        """
        Parse one entry of the storage file.

        Raises:
            StorageFormatError: If a key is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise StorageFormatError("starboard entry must be an object")
        channel_id = data.get("channelID")
        guild_id = data.get("guildID")
        if not isinstance(channel_id, str) or not channel_id:
            raise StorageFormatError("starboard entry has no channelID")
        if guild_id is not None and not isinstance(guild_id, str):
            raise StorageFormatError("starboard guildID must be a string")

        return cls(
            channel_id=channel_id,
            guild_id=guild_id,
            options=StarboardOptions.from_dict(data.get("options")),
        )
