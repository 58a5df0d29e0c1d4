"""Configuration helpers for the gateway runtime."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_REGION = "us-east-1"
DEFAULT_EVENT_NAME = "Minecraft Esport Tournament"
DEFAULT_COOLDOWN_HOURS = 24

REQUIRED_VARS = ("DISCORD_TOKEN", "CHANNEL_ID", "ACCEPTED_ROLE_ID")


def env_bool(name: str, *, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


def env_int(name: str, *, default: int | None = None) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class EnvironmentConfig:
    discord_token: str
    channel_id: int
    accepted_role_id: int
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    table_name: str | None = None
    aws_region: str = DEFAULT_REGION
    event_name: str = DEFAULT_EVENT_NAME
    event_date: str | None = None
    cooldown_hours: int = DEFAULT_COOLDOWN_HOURS
    log_level: str = "INFO"
    debug_http: bool = False

    @classmethod
    def load(cls) -> "EnvironmentConfig":
        missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
        if missing:
            raise RuntimeError("Missing env vars: " + ", ".join(sorted(missing)))

        invalid = [
            name
            for name in ("CHANNEL_ID", "ACCEPTED_ROLE_ID")
            if env_int(name) is None
        ]
        if invalid:
            raise RuntimeError("Invalid numeric env vars: " + ", ".join(invalid))

        cooldown_hours = env_int("COOLDOWN_HOURS", default=DEFAULT_COOLDOWN_HOURS)
        if cooldown_hours is None or cooldown_hours <= 0:
            cooldown_hours = DEFAULT_COOLDOWN_HOURS

        return cls(
            discord_token=os.environ["DISCORD_TOKEN"],
            channel_id=env_int("CHANNEL_ID"),  # type: ignore[arg-type]
            accepted_role_id=env_int("ACCEPTED_ROLE_ID"),  # type: ignore[arg-type]
            host=os.getenv("HOST") or DEFAULT_HOST,
            port=env_int("PORT", default=DEFAULT_PORT) or DEFAULT_PORT,
            table_name=os.getenv("DDB_TABLE_NAME") or None,
            aws_region=os.getenv("AWS_REGION", DEFAULT_REGION),
            event_name=os.getenv("EVENT_NAME") or DEFAULT_EVENT_NAME,
            event_date=os.getenv("EVENT_DATE") or None,
            cooldown_hours=cooldown_hours,
            log_level=_log_level(os.getenv("LOG_LEVEL")),
            debug_http=env_bool("DEBUG_HTTP"),
        )


def _log_level(raw: str | None) -> str:
    level = (raw or "").strip().upper()
    if level in logging.getLevelNamesMapping():
        return level
    return "INFO"
