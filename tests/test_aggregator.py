"""
Property-based tests for vote aggregation.

Feature: starboards
"""

import asyncio

from hypothesis import given, settings
from hypothesis import strategies as st

from starboards.aggregator import VoteAggregator
from starboards.emitter import EventEmitter
from starboards.exceptions import ServerError
from starboards.testing import (
    MockPlatformClient,
    create_mock_channel,
    create_mock_message,
    create_mock_user,
)
from starboards.types import (
    Message,
    ReactionAdded,
    ReactionEvent,
    ReactionKind,
    ReactionRemoved,
    ReactionsCleared,
    ResolvedContext,
    StarboardConfig,
    StarboardEvent,
    StarboardOptions,
)

AUTHOR_ID = "999"


def _config(**options: object) -> StarboardConfig:
    return StarboardConfig(
        channel_id="1", guild_id="9", options=StarboardOptions.merge(dict(options))
    )


def _setup() -> tuple[MockPlatformClient, EventEmitter, VoteAggregator, list[object]]:
    client = MockPlatformClient()
    emitter = EventEmitter()
    received: list[object] = []
    for event in StarboardEvent:
        emitter.on(event, received.append)
    return client, emitter, VoteAggregator(client, emitter), received


def _message(client: MockPlatformClient, bot_author: bool = False) -> Message:
    author = create_mock_user(user_id=AUTHOR_ID, username="author", bot=bot_author)
    return client.add_message(create_mock_message(message_id="7", channel_id="1", author=author))


def _context(
    kind: ReactionKind, config: StarboardConfig, message: Message, user_id: str | None = "42"
) -> ResolvedContext:
    event = ReactionEvent(
        kind=kind,
        channel_id=message.channel_id,
        message_id=message.id,
        user_id=None if kind is ReactionKind.REMOVE_ALL else user_id,
    )
    user = None if kind is ReactionKind.REMOVE_ALL else create_mock_user(user_id=user_id or "42")
    return ResolvedContext(
        event=event,
        config=config,
        channel=create_mock_channel(channel_id="1"),
        message=message,
        user=user,
    )


def test_self_star_is_published_but_not_counted() -> None:
    client, _, aggregator, received = _setup()
    message = _message(client)
    client.add_reaction(message, "⭐", "42")
    client.add_reaction(message, "⭐", AUTHOR_ID)
    config = _config(threshold=2)

    payload = asyncio.run(
        aggregator.process(_context(ReactionKind.ADD, config, message, user_id=AUTHOR_ID))
    )

    assert isinstance(payload, ReactionAdded)
    assert received == [payload]
    assert payload.counted is False
    assert payload.count == 1
    assert payload.threshold_reached is False
    assert client.get_calls("count_reactors")[0].kwargs == {"exclude_user_id": AUTHOR_ID}


def test_self_star_counts_when_allowed() -> None:
    client, _, aggregator, _ = _setup()
    message = _message(client)
    client.add_reaction(message, "⭐", "42")
    client.add_reaction(message, "⭐", AUTHOR_ID)

    payload = asyncio.run(
        aggregator.process(
            _context(ReactionKind.ADD, _config(threshold=2, selfStar=True), message, AUTHOR_ID)
        )
    )

    assert isinstance(payload, ReactionAdded)
    assert payload.counted is True
    assert payload.count == 2
    assert payload.threshold_reached is True


def test_bot_message_vote_is_published_but_never_reaches_threshold() -> None:
    client, _, aggregator, received = _setup()
    message = _message(client, bot_author=True)
    client.add_reaction(message, "⭐", "42")
    client.add_reaction(message, "⭐", "43")

    payload = asyncio.run(
        aggregator.process(_context(ReactionKind.ADD, _config(threshold=1, starBotMsg=False), message))
    )

    assert isinstance(payload, ReactionAdded)
    assert received == [payload]
    assert payload.count == 2
    assert payload.counted is False
    assert payload.threshold_reached is False


def test_bot_message_vote_counts_when_bot_messages_are_starred() -> None:
    client, _, aggregator, _ = _setup()
    message = _message(client, bot_author=True)
    client.add_reaction(message, "⭐", "42")

    payload = asyncio.run(aggregator.process(_context(ReactionKind.ADD, _config(threshold=1), message)))

    assert isinstance(payload, ReactionAdded)
    assert payload.counted is True
    assert payload.threshold_reached is True


def test_bot_message_removal_is_still_published() -> None:
    client, _, aggregator, received = _setup()
    message = _message(client, bot_author=True)
    client.add_reaction(message, "⭐", "1")

    payload = asyncio.run(
        aggregator.process(
            _context(ReactionKind.REMOVE, _config(threshold=1, starBotMsg=False), message)
        )
    )

    assert isinstance(payload, ReactionRemoved)
    assert received == [payload]
    assert payload.count == 1
    assert payload.threshold_reached is False


@given(
    voters=st.integers(min_value=0, max_value=15),
    threshold=st.integers(min_value=1, max_value=15),
)
@settings(max_examples=100)
def test_property_threshold_reached_iff_count_at_least_threshold(voters: int, threshold: int) -> None:
    """
    Property: threshold evaluation

    For any number of distinct voters and any threshold, the published
    count equals the number of voters and threshold_reached is exactly
    count >= threshold.
    """
    client, _, aggregator, _ = _setup()
    message = _message(client)
    for i in range(voters):
        client.add_reaction(message, "⭐", f"user-{i}")

    payload = asyncio.run(
        aggregator.process(_context(ReactionKind.ADD, _config(threshold=threshold), message))
    )

    assert isinstance(payload, ReactionAdded)
    assert payload.count == voters
    assert payload.threshold_reached is (voters >= threshold)


@given(adds=st.lists(st.sampled_from(["a", "b", "c"]), max_size=10))
@settings(max_examples=50)
def test_property_repeated_votes_are_not_double_counted(adds: list[str]) -> None:
    """
    Property: no double counting

    Replaying add events for the same users never inflates the count past
    the number of distinct reactors.
    """
    client, _, aggregator, _ = _setup()
    message = _message(client)
    config = _config(threshold=1)

    async def run() -> list[int]:
        counts = []
        for user_id in adds:
            client.add_reaction(message, "⭐", user_id)
            payload = await aggregator.process(_context(ReactionKind.ADD, config, message, user_id))
            assert isinstance(payload, ReactionAdded)
            counts.append(payload.count)
        return counts

    counts = asyncio.run(run())

    for i, count in enumerate(counts):
        assert count == len(set(adds[: i + 1]))


def test_removal_reports_live_count() -> None:
    client, _, aggregator, _ = _setup()
    message = _message(client)
    client.add_reaction(message, "⭐", "1")
    client.add_reaction(message, "⭐", "2")
    client.remove_reaction(message, "⭐", "2")

    payload = asyncio.run(
        aggregator.process(_context(ReactionKind.REMOVE, _config(threshold=2), message, "2"))
    )

    assert isinstance(payload, ReactionRemoved)
    assert payload.count == 1
    assert payload.threshold_reached is False


def test_remove_all_publishes_without_counting() -> None:
    client, _, aggregator, received = _setup()
    message = _message(client)
    config = _config()

    payload = asyncio.run(aggregator.process(_context(ReactionKind.REMOVE_ALL, config, message)))

    assert payload == ReactionsCleared(config=config, message=message)
    assert received == [payload]
    assert not client.was_called("count_reactors")


def test_count_failure_is_discarded() -> None:
    client, _, aggregator, received = _setup()
    message = _message(client)
    client.configure_error("count_reactors", ServerError("500", "Internal Server Error"))

    payload = asyncio.run(aggregator.process(_context(ReactionKind.ADD, _config(), message)))

    assert payload is None
    assert received == []


def test_vote_without_user_is_discarded() -> None:
    client, _, aggregator, received = _setup()
    message = _message(client)
    context = _context(ReactionKind.ADD, _config(), message)
    context = ResolvedContext(
        event=context.event, config=context.config, channel=context.channel, message=message, user=None
    )

    assert asyncio.run(aggregator.process(context)) is None
    assert received == []
    assert not client.was_called("count_reactors")
