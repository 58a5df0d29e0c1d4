"""Per-applicant submission cooldowns.

Two interchangeable stores are provided. ``InMemoryCooldownStore`` keeps
state in the process and prunes expired entries as it writes.
``DynamoCooldownStore`` keeps one item per applicant in the shared DynamoDB
table with an ``expires_at`` epoch attribute so the table's TTL setting can
reap old records, and cooldowns survive restarts.
"""

from __future__ import annotations

import asyncio
import logging
import math
from datetime import UTC, datetime, timedelta
from typing import Final

COOLDOWN_HOURS: Final[int] = 24
COOLDOWN_PERIOD: Final[timedelta] = timedelta(hours=COOLDOWN_HOURS)
COOLDOWN_PREFIX: Final[str] = "COOLDOWN_"

log: Final = logging.getLogger("registration-gateway")


def format_remaining(remaining: timedelta) -> str:
    """Render a duration as whole hours and minutes, e.g. ``23h 59m``."""
    total_minutes = math.ceil(max(remaining.total_seconds(), 0) / 60)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m"


def _remaining(last: datetime, now: datetime, period: timedelta) -> timedelta:
    return max(period - (now - last), timedelta(0))


class InMemoryCooldownStore:
    def __init__(self, period: timedelta = COOLDOWN_PERIOD) -> None:
        self.period = period
        self._last: dict[str, datetime] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._last)

    async def record_submission(self, applicant_id: str, now: datetime) -> None:
        async with self._lock:
            self._prune(now)
            self._last[applicant_id] = now

    async def is_blocked(self, applicant_id: str, now: datetime) -> bool:
        return await self.time_remaining(applicant_id, now) > timedelta(0)

    async def time_remaining(self, applicant_id: str, now: datetime) -> timedelta:
        async with self._lock:
            last = self._last.get(applicant_id)
        if last is None:
            return timedelta(0)
        return _remaining(last, now, self.period)

    def _prune(self, now: datetime) -> None:
        expired = [
            key for key, last in self._last.items() if now - last >= self.period
        ]
        for key in expired:
            del self._last[key]


class DynamoCooldownStore:
    """Cooldown markers persisted in a DynamoDB table keyed by ``discord_id``."""

    def __init__(self, table, period: timedelta = COOLDOWN_PERIOD) -> None:
        self._table = table
        self.period = period

    @staticmethod
    def key(applicant_id: str) -> dict[str, str]:
        return {"discord_id": f"{COOLDOWN_PREFIX}{applicant_id}"}

    async def record_submission(self, applicant_id: str, now: datetime) -> None:
        expires_at = now + self.period
        try:
            self._table.put_item(
                Item={
                    **self.key(applicant_id),
                    "applicant_id": applicant_id,
                    "timestamp": now.isoformat(),
                    "expires_at": int(expires_at.timestamp()),
                    "status": "SUBMITTED",
                }
            )
        except Exception as exc:  # pylint: disable=broad-except
            log.exception("Failed to record cooldown for %s: %s", applicant_id, exc)

    async def is_blocked(self, applicant_id: str, now: datetime) -> bool:
        return await self.time_remaining(applicant_id, now) > timedelta(0)

    async def time_remaining(self, applicant_id: str, now: datetime) -> timedelta:
        key = self.key(applicant_id)
        try:
            response = self._table.get_item(Key=key)
        except Exception as exc:  # pylint: disable=broad-except
            log.exception("Failed to load cooldown for %s: %s", applicant_id, exc)
            return timedelta(0)

        item = response.get("Item")
        if not item:
            return timedelta(0)

        last = _parse_timestamp(item.get("timestamp"))
        if last is None:
            # Cannot evaluate; drop the marker so it doesn't block future submissions.
            self._delete(key, applicant_id)
            return timedelta(0)

        remaining = _remaining(last, now, self.period)
        if not remaining:
            # TTL reaping is lazy, so expired markers may still be returned.
            self._delete(key, applicant_id)
        return remaining

    def _delete(self, key: dict[str, str], applicant_id: str) -> None:
        try:
            self._table.delete_item(Key=key)
        except Exception as exc:  # pylint: disable=broad-except
            log.exception(
                "Failed to clear stale cooldown for %s: %s", applicant_id, exc
            )


def _parse_timestamp(timestamp_str: str | None) -> datetime | None:
    """Parse an ISO formatted timestamp, returning ``None`` on failure."""
    if not timestamp_str:
        return None

    try:
        parsed = datetime.fromisoformat(str(timestamp_str).replace("Z", "+00:00"))
    except (ValueError, TypeError) as exc:
        log.warning("Invalid timestamp %s: %s", timestamp_str, exc)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
