"""Starboards - reaction-vote starboards for Discord bots."""

from starboards.aggregator import VoteAggregator
from starboards.emitter import EventEmitter
from starboards.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    DuplicateStarboardError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    StarboardError,
    StorageFormatError,
    ValidationError,
)
from starboards.logging import configure_logging, get_logger
from starboards.manager import StarboardsManager
from starboards.normalizer import RawEventNormalizer
from starboards.platform import PlatformClient, RawPacketSource
from starboards.registry import StarboardRegistry
from starboards.rest import RESTPlatformClient
from starboards.storage import JSONFileStorage, MemoryStorage, StarboardStorage
from starboards.transport import RESTTransport, RetryConfig
from starboards.types import (
    ReactionAdded,
    ReactionRemoved,
    ReactionsCleared,
    StarboardConfig,
    StarboardCreated,
    StarboardDeleted,
    StarboardEvent,
    StarboardOptions,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Manager
    "StarboardsManager",
    "StarboardRegistry",
    "RawEventNormalizer",
    "VoteAggregator",
    "EventEmitter",
    # Platform
    "PlatformClient",
    "RawPacketSource",
    "RESTPlatformClient",
    "RESTTransport",
    "RetryConfig",
    # Storage
    "StarboardStorage",
    "JSONFileStorage",
    "MemoryStorage",
    # Types
    "StarboardConfig",
    "StarboardOptions",
    "StarboardEvent",
    "StarboardCreated",
    "StarboardDeleted",
    "ReactionAdded",
    "ReactionRemoved",
    "ReactionsCleared",
    # Exceptions
    "StarboardError",
    "ConfigurationError",
    "ValidationError",
    "DuplicateStarboardError",
    "NotFoundError",
    "StorageFormatError",
    "AuthenticationError",
    "AuthorizationError",
    "RateLimitedError",
    "ServerError",
    # Logging
    "configure_logging",
    "get_logger",
]
