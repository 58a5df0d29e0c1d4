"""Staff decisions on registration prompts.

Button clicks arrive as component interactions whose ``custom_id`` is an
``ActionToken``. The handler acknowledges the click, resolves the applicant,
applies the decision and finalizes the prompt by removing its buttons.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Final

import discord

from .embeds import (
    ACCEPT_COLOR,
    DENY_COLOR,
    build_acceptance_dm,
    build_denial_dm,
    finalize_prompt_embed,
)
from .errors import (
    AlreadyDecided,
    ConfigurationError,
    DecisionError,
    DirectMessageDisabled,
    MemberNotFound,
)
from .ledger import DecisionLedger
from .models import ActionToken, Decision, utc_now

# Discord error code for "Cannot send messages to this user"
CANNOT_MESSAGE_USER: Final[int] = 50007

DEFAULT_EVENT_NAME: Final[str] = "Minecraft Esport Tournament"
GENERIC_WARNING: Final[str] = (
    "⚠️ An error occurred while processing this action. "
    "Please check the bot's permissions and role hierarchy."
)

log: Final = logging.getLogger("registration-gateway")


class MemberDirectory:
    """Resolves applicant identities to guild members.

    Snowflake ids go through the member cache and then the REST API. Anything
    else is treated as a legacy username or ``name#discriminator`` tag.
    """

    async def resolve(
        self, guild: discord.Guild, applicant_id: str
    ) -> discord.Member | None:
        if not applicant_id.isdigit():
            return guild.get_member_named(applicant_id)

        member_id = int(applicant_id)
        member = guild.get_member(member_id)
        if member is not None:
            return member

        try:
            return await guild.fetch_member(member_id)
        except discord.NotFound:
            return None
        except discord.HTTPException as exc:
            log.warning("Cannot fetch member %s – HTTP error: %s", applicant_id, exc)
            return None


class DecisionHandler:
    def __init__(
        self,
        accepted_role_id: int,
        *,
        directory: MemberDirectory | None = None,
        ledger: DecisionLedger | None = None,
        event_name: str = DEFAULT_EVENT_NAME,
        event_date: str | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.accepted_role_id = accepted_role_id
        self.directory = directory or MemberDirectory()
        self.ledger = ledger or DecisionLedger(None)
        self.event_name = event_name
        self.event_date = event_date
        self._clock = clock
        self._in_flight: set[str] = set()

    async def handle(self, interaction: discord.Interaction) -> None:
        if interaction.type is not discord.InteractionType.component:
            return
        token = ActionToken.parse((interaction.data or {}).get("custom_id"))
        if token is None:
            return

        # Component interactions must be acknowledged within three seconds.
        await interaction.response.defer()

        if token.applicant_id in self._in_flight:
            await interaction.followup.send(
                f"⏳ A decision for {token.applicant_id} is already being processed.",
                ephemeral=True,
            )
            return

        self._in_flight.add(token.applicant_id)
        try:
            await self._apply(interaction, token)
        except DecisionError as exc:
            await interaction.followup.send(exc.staff_message, ephemeral=True)
        except Exception as exc:  # pylint: disable=broad-except
            log.exception("Error during interaction processing: %s", exc)
            await interaction.followup.send(GENERIC_WARNING, ephemeral=True)
        finally:
            self._in_flight.discard(token.applicant_id)

    async def _apply(
        self, interaction: discord.Interaction, token: ActionToken
    ) -> None:
        guild = interaction.guild
        if guild is None:
            raise ConfigurationError("Error: Guild not found.")

        previous = await self._previous_decision(interaction, token)
        if previous is not None:
            raise AlreadyDecided(
                token.applicant_id,
                previous.get("decision", ""),
                previous.get("staff_name", ""),
            )

        member = await self.directory.resolve(guild, token.applicant_id)
        if member is None:
            log.info(
                "Could not resolve applicant %s for %s by %s",
                token.applicant_id,
                token.decision.value,
                interaction.user,
            )
            raise MemberNotFound(token.applicant_id)

        if token.decision is Decision.ACCEPT:
            await self._accept(interaction, guild, member, token)
        else:
            await self._deny(interaction, member, token)

    async def _accept(
        self,
        interaction: discord.Interaction,
        guild: discord.Guild,
        member: discord.Member,
        token: ActionToken,
    ) -> None:
        role = guild.get_role(self.accepted_role_id)
        if role is None:
            log.error("Role with ID %s not found.", self.accepted_role_id)
            raise ConfigurationError(
                "⚠️ Error: The specified role was not found on the server."
            )

        if role not in member.roles:
            await member.add_roles(
                role, reason=f"Tournament registration accepted by {interaction.user}"
            )
        log.info(
            "Accepted %s (%s) - granted role %s by %s",
            member,
            token.applicant_id,
            role.id,
            interaction.user,
        )
        await self._record(interaction, token)

        embed = build_acceptance_dm(
            member, role, event_name=self.event_name, event_date=self.event_date
        )
        delivered = await self._notify(interaction, member, embed)
        await self.ledger.mark_notified(token.applicant_id, delivered=delivered)

        summary = f'✅ **Accepted** {member} and assigned the "{role.name}" role.'
        if not delivered:
            summary += " The acceptance DM could not be delivered."
        await self._finalize(
            interaction,
            content=summary,
            color=ACCEPT_COLOR,
            result_text=f"✅ Accepted by {interaction.user.mention}",
        )

    async def _deny(
        self,
        interaction: discord.Interaction,
        member: discord.Member,
        token: ActionToken,
    ) -> None:
        log.info(
            "Denied %s (%s) by %s", member, token.applicant_id, interaction.user
        )
        await self._record(interaction, token)

        embed = build_denial_dm(member, event_name=self.event_name)
        delivered = await self._notify(interaction, member, embed)
        await self.ledger.mark_notified(token.applicant_id, delivered=delivered)

        if delivered:
            summary = f"❌ **Denied** {member}. A notification DM has been sent."
        else:
            summary = (
                f"❌ **Denied** {member}. The notification DM could not be delivered."
            )
        await self._finalize(
            interaction,
            content=summary,
            color=DENY_COLOR,
            result_text=f"❌ Denied by {interaction.user.mention}",
        )

    async def _record(
        self, interaction: discord.Interaction, token: ActionToken
    ) -> None:
        message = interaction.message
        await self.ledger.record_applied(
            token.applicant_id,
            token.decision,
            staff_id=interaction.user.id,
            staff_name=str(interaction.user),
            message_id=message.id if message is not None else None,
            now=self._clock(),
        )

    async def _notify(
        self,
        interaction: discord.Interaction,
        member: discord.Member,
        embed: discord.Embed,
    ) -> bool:
        """DM the applicant; a DM-disabled refusal is reported, not raised."""
        try:
            await member.send(embed=embed)
        except discord.Forbidden as exc:
            if exc.code != CANNOT_MESSAGE_USER:
                raise
            log.warning("Could not send a DM to %s: DMs disabled", member)
            warning = DirectMessageDisabled(str(member))
            await interaction.followup.send(warning.staff_message, ephemeral=True)
            return False
        return True

    async def _finalize(
        self,
        interaction: discord.Interaction,
        *,
        content: str,
        color: discord.Color,
        result_text: str,
    ) -> None:
        embed = finalize_prompt_embed(
            interaction.message, color=color, result_text=result_text
        )
        try:
            await interaction.edit_original_response(
                content=content, embed=embed, view=None
            )
        except discord.NotFound:
            log.warning("Message not found when trying to update decision result")
            raise
        except discord.Forbidden:
            log.warning("No permission to edit decision message")
            raise

    async def _previous_decision(
        self, interaction: discord.Interaction, token: ActionToken
    ) -> dict | None:
        """Ledger entry for a decision already taken on this same prompt."""
        message = interaction.message
        if not self.ledger.enabled or message is None:
            return None
        record = await self.ledger.get(token.applicant_id)
        if record is None or record.get("message_id") != str(message.id):
            return None
        return record
