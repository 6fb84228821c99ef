"""Starboards exception classes."""


class StarboardError(Exception):
    """Base exception for all starboards errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(StarboardError):
    """Raised when the manager or a client is missing a required collaborator."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class ValidationError(StarboardError):
    """Raised on invalid options, event names or payloads."""

    pass


class DuplicateStarboardError(StarboardError):
    """Raised when a starboard already exists for a channel and emoji."""

    def __init__(self, channel_id: str, emoji: str) -> None:
        super().__init__(
            "DUPLICATE_STARBOARD",
            f"There is already a starboard in channel {channel_id} with the emoji {emoji}",
        )
        self.channel_id = channel_id
        self.emoji = emoji


class NotFoundError(StarboardError):
    """Raised when a starboard or a remote resource is not found."""

    pass


class StorageFormatError(StarboardError):
    """Raised when the storage content is not a valid starboard list."""

    def __init__(self, message: str) -> None:
        super().__init__("STORAGE_FORMAT", message)


class AuthenticationError(StarboardError):
    """Raised when the platform rejects the bot token."""

    pass


class AuthorizationError(StarboardError):
    """Raised when access to a channel or message is denied."""

    pass


class RateLimitedError(StarboardError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: float,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ServerError(StarboardError):
    """Raised on server errors (5xx) and connection failures."""

    pass
