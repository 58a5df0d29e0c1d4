from __future__ import annotations

import logging
from typing import Final

import discord

log: Final = logging.getLogger("registration-gateway")


async def resolve_review_channel(
    client: discord.Client,
    channel_id: int,
) -> discord.abc.Messageable | None:
    """Return the staff review channel or None if unavailable.

    Looks in the client cache first, then tries REST fetch as fallback.
    """
    if not channel_id:
        return None

    channel = client.get_channel(channel_id)
    if isinstance(channel, discord.abc.Messageable):
        return channel

    try:
        channel = await client.fetch_channel(channel_id)
    except discord.NotFound:
        log.warning("Channel %s not found", channel_id)
        return None
    except discord.Forbidden:
        log.warning("No access to channel %s – check bot permissions", channel_id)
        return None
    except discord.HTTPException as exc:
        log.warning("Cannot fetch channel %s – HTTP error: %s", channel_id, exc)
        return None

    if not isinstance(channel, discord.abc.Messageable):
        log.warning("Channel ID %s is not a text channel", channel_id)
        return None
    return channel
