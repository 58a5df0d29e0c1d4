from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from botocore.exceptions import ClientError

NOW = datetime(2025, 9, 1, 12, 0, tzinfo=UTC)


class FakeTable:
    """In-memory stand-in for a DynamoDB table keyed by ``discord_id``."""

    def __init__(self) -> None:
        self.items: dict[str, dict[str, object]] = {}
        self.fail_on: set[str] = set()

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise ClientError(
                {"Error": {"Code": "InternalServerError", "Message": "boom"}},
                operation,
            )

    def get_item(self, *, Key):
        self._maybe_fail("GetItem")
        item = self.items.get(Key["discord_id"])
        return {"Item": dict(item)} if item else {}

    def put_item(self, *, Item):
        self._maybe_fail("PutItem")
        self.items[Item["discord_id"]] = dict(Item)

    def delete_item(self, *, Key):
        self._maybe_fail("DeleteItem")
        self.items.pop(Key["discord_id"], None)

    def update_item(
        self,
        *,
        Key,
        UpdateExpression,
        ExpressionAttributeValues,
        ExpressionAttributeNames=None,
    ):
        self._maybe_fail("UpdateItem")
        names = ExpressionAttributeNames or {}
        item = self.items.setdefault(Key["discord_id"], dict(Key))
        assignments = UpdateExpression.removeprefix("SET ").split(",")
        for assignment in assignments:
            attr, placeholder = (part.strip() for part in assignment.split("="))
            item[names.get(attr, attr)] = ExpressionAttributeValues[placeholder]


@pytest.fixture
def fake_table() -> FakeTable:
    return FakeTable()


def make_member(member_id: int = 111, name: str = "ann") -> MagicMock:
    member = MagicMock(spec=discord.Member)
    member.id = member_id
    member.name = name
    member.mention = f"<@{member_id}>"
    member.roles = []
    member.add_roles = AsyncMock()
    member.send = AsyncMock()
    member.__str__.return_value = name
    return member


def make_role(role_id: int = 555, name: str = "Contender") -> MagicMock:
    role = MagicMock(spec=discord.Role)
    role.id = role_id
    role.name = name
    return role


@pytest.fixture
def member() -> MagicMock:
    return make_member()


@pytest.fixture
def role() -> MagicMock:
    return make_role()


@pytest.fixture
def guild(member, role) -> MagicMock:
    guild = MagicMock(spec=discord.Guild)
    guild.id = 987654321
    guild.name = "Arena"
    guild.icon = None
    guild.get_member.side_effect = lambda member_id: (
        member if member_id == member.id else None
    )
    guild.get_member_named.return_value = None
    guild.get_role.side_effect = lambda role_id: role if role_id == role.id else None
    guild.fetch_member = AsyncMock(
        side_effect=discord.NotFound(MagicMock(status=404), "Unknown Member")
    )
    member.guild = guild
    return guild


def make_interaction(custom_id: str | None, guild=None) -> MagicMock:
    interaction = MagicMock(spec=discord.Interaction)
    interaction.type = discord.InteractionType.component
    interaction.data = {"custom_id": custom_id} if custom_id is not None else {}
    interaction.guild = guild
    interaction.user = MagicMock(spec=discord.Member)
    interaction.user.id = 42
    interaction.user.mention = "<@42>"
    interaction.user.__str__.return_value = "staff"
    interaction.message = MagicMock(spec=discord.Message)
    interaction.message.id = 777
    interaction.message.embeds = [discord.Embed(title="New Tournament Registration!")]
    interaction.response = MagicMock()
    interaction.response.defer = AsyncMock()
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    interaction.edit_original_response = AsyncMock()
    return interaction
