"""Gateway runtime composing the Discord client, stores and HTTP server."""

from __future__ import annotations

import logging
from datetime import timedelta

import boto3
import discord

from registration import (
    DecisionHandler,
    DecisionLedger,
    DynamoCooldownStore,
    InMemoryCooldownStore,
    RegistrationIntake,
)

from .config import EnvironmentConfig
from .web import create_web_app, start_web_server

log = logging.getLogger("registration-gateway")


class GatewayClient(discord.Client):
    """Discord client forwarding component interactions to the decision handler."""

    def __init__(self, *, intents: discord.Intents) -> None:
        super().__init__(intents=intents)
        self.decisions: DecisionHandler | None = None

    async def on_ready(self) -> None:
        user_id = self.user.id if self.user else None
        log.info("Bot is online as %s (%s)", self.user, user_id)

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        if self.decisions is None:
            return
        await self.decisions.handle(interaction)


class GatewayRuntime:
    def __init__(self, config: EnvironmentConfig, *, dynamodb=None) -> None:
        intents = discord.Intents.default()
        intents.guilds = True
        intents.members = True

        self.config = config
        self.bot = GatewayClient(intents=intents)

        table = None
        if config.table_name:
            if dynamodb is None:
                dynamodb = boto3.resource("dynamodb", region_name=config.aws_region)
            table = dynamodb.Table(config.table_name)
        self.table = table

        period = timedelta(hours=config.cooldown_hours)
        if table is not None:
            self.cooldowns = DynamoCooldownStore(table, period)
        else:
            log.warning("DDB_TABLE_NAME not set - cooldowns are kept in memory only")
            self.cooldowns = InMemoryCooldownStore(period)

        self.intake = RegistrationIntake(self.bot, config.channel_id, self.cooldowns)
        self.bot.decisions = DecisionHandler(
            config.accepted_role_id,
            ledger=DecisionLedger(table),
            event_name=config.event_name,
            event_date=config.event_date,
        )
        self.web_app = create_web_app(
            self.intake, client=self.bot, verbose_logging=config.debug_http
        )

    async def run(self) -> None:
        runner = await start_web_server(
            self.web_app, host=self.config.host, port=self.config.port
        )
        try:
            async with self.bot:
                await self.bot.start(self.config.discord_token)
        finally:
            await runner.cleanup()

    @classmethod
    def create(cls) -> "GatewayRuntime":
        config = EnvironmentConfig.load()
        return cls(config)


async def main() -> None:
    runtime = GatewayRuntime.create()
    logging.getLogger().setLevel(runtime.config.log_level)
    await runtime.run()


__all__ = ["GatewayClient", "GatewayRuntime", "main"]
