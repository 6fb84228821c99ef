#!/usr/bin/env python3
"""
Basic starboards usage example.

Drives a StarboardsManager with the in-memory mock platform client, so it
runs without a bot token or a gateway connection.
Run with: python examples/basic_usage.py
"""

import asyncio

from starboards import DuplicateStarboardError, StarboardError, StarboardsManager
from starboards.testing import (
    MockPlatformClient,
    create_mock_channel,
    create_mock_message,
    create_mock_user,
    make_channel_delete_packet,
    make_reaction_packet,
)


async def main() -> None:
    print("=== Starboards Basic Usage Example ===\n")

    client = MockPlatformClient()
    channel = client.add_channel(create_mock_channel(channel_id="100", name="memes"))
    author = client.add_user(create_mock_user(user_id="1", username="author"))
    message = client.add_message(create_mock_message(message_id="500", channel_id="100", author=author))
    for user_id in ("2", "3", "4"):
        client.add_user(create_mock_user(user_id=user_id, username=f"voter-{user_id}"))

    # storage=False keeps starboards in memory; pass a path to persist them
    manager = StarboardsManager(client, storage=False)

    @manager.on("starboardCreate")
    def on_create(event):
        print(f"   starboardCreate: channel {event.config.channel_id} ({event.config.emoji})")

    @manager.on("starboardReactionAdd")
    def on_vote(event):
        state = "reached" if event.threshold_reached else "not reached"
        note = "" if event.counted else " (self-star, not counted)"
        print(f"   vote by {event.user.username}: {event.count}/{event.config.options.threshold} {state}{note}")

    @manager.on("starboardDelete")
    def on_delete(event):
        print(f"   starboardDelete: channel {event.config.channel_id}")

    async with manager:
        # 1. Create a starboard
        print("1. Creating a starboard...")
        await manager.create(channel, {"threshold": 2, "selfStar": False})

        try:
            await manager.create(channel)
        except DuplicateStarboardError as e:
            print(f"   Duplicate rejected: {e.message}")
        print("\n   OK: Starboard created\n")

        # 2. Feed raw reaction packets
        print("2. Voting...")
        for user_id in ("1", "2", "3"):
            client.add_reaction(message, "⭐", user_id)
            await client.dispatch(make_reaction_packet(channel_id="100", message_id="500", user_id=user_id))

        # other emoji and other channels never trigger a fetch
        fetches = client.fetch_count
        await client.dispatch(make_reaction_packet(channel_id="100", message_id="500", user_id="4", emoji="🔥"))
        await client.dispatch(make_reaction_packet(channel_id="999", user_id="4"))
        assert client.fetch_count == fetches
        print("\n   OK: Votes aggregated\n")

        # 3. Channel deleted upstream
        print("3. Deleting the channel...")
        await client.dispatch(make_channel_delete_packet(channel_id="100"))
        print(f"   Remaining starboards: {manager.starboards}")

        try:
            await manager.delete("100")
        except StarboardError as e:
            print(f"   Caught {type(e).__name__}: {e.message}")
        print("\n   OK: Starboard removed\n")

    print("=== Done ===")


if __name__ == "__main__":
    asyncio.run(main())
