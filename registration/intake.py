from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Final

import discord

from .channels import resolve_review_channel
from .embeds import DecisionPromptView, build_prompt_embed
from .errors import ChannelUnavailable, DeliveryFailed, RateLimited
from .models import Application, utc_now

log: Final = logging.getLogger("registration-gateway")


@dataclass(frozen=True, slots=True)
class Accepted:
    applicant_id: str
    message_id: int | None
    message: str = "Registration sent successfully!"


class RegistrationIntake:
    """Turns form submissions into staff review prompts."""

    def __init__(
        self,
        client: discord.Client,
        channel_id: int,
        cooldowns,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._client = client
        self.channel_id = channel_id
        self.cooldowns = cooldowns
        self._clock = clock

    async def submit(self, application: Application) -> Accepted:
        applicant_id = application.applicant_id
        now = self._clock()

        # Cooldown is checked before posting and recorded only after a successful post.
        remaining = await self.cooldowns.time_remaining(applicant_id, now)
        if remaining > timedelta(0):
            log.info("Rejected registration for %s - cooldown active", applicant_id)
            raise RateLimited(remaining)

        channel = await resolve_review_channel(self._client, self.channel_id)
        if channel is None:
            log.error("Review channel %s is unavailable", self.channel_id)
            raise ChannelUnavailable()

        embed = build_prompt_embed(application, now)
        view = DecisionPromptView(application)
        try:
            message = await channel.send(embed=embed, view=view)
        except discord.Forbidden as exc:
            log.warning("No send permission in review channel %s", self.channel_id)
            raise DeliveryFailed() from exc
        except discord.HTTPException as exc:
            log.exception("Failed to post registration for %s: %s", applicant_id, exc)
            raise DeliveryFailed() from exc

        # Clicks are routed through on_interaction; drop the view from the
        # client's view store so posted prompts are not retained.
        view.stop()
        await self.cooldowns.record_submission(applicant_id, now)
        log.info(
            "Posted registration for %s (%s) to channel %s",
            applicant_id,
            application.ign,
            self.channel_id,
        )
        return Accepted(
            applicant_id=applicant_id, message_id=getattr(message, "id", None)
        )
