"""Embeds and components for review prompts and applicant DMs."""

from __future__ import annotations

from datetime import datetime

import discord

from .models import EMBED_FIELD_VALUE_MAX, Application, Decision

PROMPT_TITLE = "New Tournament Registration!"
PROMPT_COLOR = discord.Color.from_str("#3f51b5")
ACCEPT_COLOR = discord.Color.from_str("#57F287")
DENY_COLOR = discord.Color.from_str("#ED4245")


def _field_value(value: str) -> str:
    if len(value) <= EMBED_FIELD_VALUE_MAX:
        return value
    return value[: EMBED_FIELD_VALUE_MAX - 1] + "…"


def build_prompt_embed(
    application: Application, received_at: datetime
) -> discord.Embed:
    embed = discord.Embed(
        title=PROMPT_TITLE, color=PROMPT_COLOR, timestamp=received_at
    )
    fields = (
        ("Full Name", application.full_name, True),
        ("Age", application.age, True),
        ("Email Address", application.email, False),
        ("In-Game Name (IGN)", application.ign, True),
        ("Discord ID", application.applicant_id, True),
    )
    for name, value, inline in fields:
        embed.add_field(name=name, value=_field_value(value), inline=inline)
    embed.set_footer(
        text=f"Registration received at: {received_at:%Y-%m-%d %H:%M:%S} UTC"
    )
    return embed


class DecisionPromptView(discord.ui.View):
    """Accept / Deny buttons whose custom ids carry the action token.

    Clicks are routed through the client's ``on_interaction`` listener rather
    than button callbacks, so prompts keep working across restarts.
    """

    def __init__(self, application: Application) -> None:
        super().__init__(timeout=None)
        self.add_item(
            discord.ui.Button(
                label="Accept",
                style=discord.ButtonStyle.success,
                custom_id=application.token(Decision.ACCEPT).encode(),
            )
        )
        self.add_item(
            discord.ui.Button(
                label="Deny",
                style=discord.ButtonStyle.danger,
                custom_id=application.token(Decision.DENY).encode(),
            )
        )


def build_acceptance_dm(
    member: discord.Member,
    role: discord.Role,
    *,
    event_name: str,
    event_date: str | None = None,
) -> discord.Embed:
    embed = discord.Embed(
        title="⚔️ Welcome to the Arena, Contender!",
        description=(
            f"Congratulations, **{member.name}**! Your spot in the "
            f"**{event_name}** has been officially secured."
        ),
        color=ACCEPT_COLOR,
        timestamp=discord.utils.utcnow(),
    )
    embed.set_thumbnail(url=member.display_avatar.url)
    embed.add_field(
        name="Access Granted",
        value=(
            f"You have been given the **{role.name}** role, unlocking exclusive "
            "tournament channels."
        ),
        inline=False,
    )
    embed.add_field(
        name="Next Steps",
        value=(
            "Please keep an eye on the announcements channel for bracket "
            "information and match schedules."
        ),
        inline=False,
    )
    closing = "The journey begins now. Hone your skills and get ready to compete!"
    if event_date:
        closing += f" See you on {event_date}."
    embed.add_field(name="Prepare for Battle!", value=closing, inline=False)
    _set_guild_footer(embed, member.guild)
    return embed


def build_denial_dm(member: discord.Member, *, event_name: str) -> discord.Embed:
    embed = discord.Embed(
        title="Registration Status Update",
        description=(
            f"Hello **{member.name}**, thank you for your interest in the "
            f"**{event_name}**."
        ),
        color=DENY_COLOR,
        timestamp=discord.utils.utcnow(),
    )
    embed.add_field(
        name="Our Decision",
        value=(
            "Due to the high volume of applications and limited spots, we are "
            "unfortunately unable to offer you a position in this event."
        ),
        inline=False,
    )
    embed.add_field(
        name="Stay Connected",
        value=(
            "We encourage you to stay active in our community for future events "
            "and tournaments. We appreciate your passion and skill!"
        ),
        inline=False,
    )
    _set_guild_footer(embed, member.guild)
    return embed


def finalize_prompt_embed(
    message: discord.Message | None,
    *,
    color: discord.Color,
    result_text: str,
) -> discord.Embed:
    """Copy the prompt embed with a terminal Result field appended."""
    if message is not None and message.embeds:
        embed = message.embeds[0].copy()
    else:
        embed = discord.Embed(title=PROMPT_TITLE)
    embed.color = color
    embed.add_field(name="Result", value=result_text, inline=False)
    return embed


def _set_guild_footer(embed: discord.Embed, guild: discord.Guild | None) -> None:
    if guild is None:
        return
    icon = guild.icon.url if guild.icon else None
    embed.set_footer(text=guild.name, icon_url=icon)
