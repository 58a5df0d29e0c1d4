"""Tests for registration.channels."""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from registration.channels import resolve_review_channel


@pytest.mark.asyncio
async def test_no_channel_id_returns_none():
    client = MagicMock(spec=discord.Client)
    assert await resolve_review_channel(client, 0) is None
    client.get_channel.assert_not_called()


@pytest.mark.asyncio
async def test_channel_from_client_cache():
    client = MagicMock(spec=discord.Client)
    text_channel = MagicMock(spec=discord.TextChannel)
    client.get_channel.return_value = text_channel

    assert await resolve_review_channel(client, 67890) is text_channel
    client.get_channel.assert_called_once_with(67890)


@pytest.mark.asyncio
async def test_channel_fetched_when_not_cached():
    client = MagicMock(spec=discord.Client)
    text_channel = MagicMock(spec=discord.TextChannel)
    client.get_channel.return_value = None
    client.fetch_channel = AsyncMock(return_value=text_channel)

    assert await resolve_review_channel(client, 67890) is text_channel
    client.fetch_channel.assert_awaited_once_with(67890)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        discord.NotFound(MagicMock(), "Unknown Channel"),
        discord.Forbidden(MagicMock(), "Missing Access"),
        discord.HTTPException(MagicMock(), "Server Error"),
    ],
)
async def test_fetch_failures_return_none(error):
    client = MagicMock(spec=discord.Client)
    client.get_channel.return_value = None
    client.fetch_channel = AsyncMock(side_effect=error)

    assert await resolve_review_channel(client, 67890) is None


@pytest.mark.asyncio
async def test_non_text_channel_returns_none():
    client = MagicMock(spec=discord.Client)
    client.get_channel.return_value = None
    client.fetch_channel = AsyncMock(
        return_value=MagicMock(spec=discord.CategoryChannel)
    )

    assert await resolve_review_channel(client, 67890) is None
