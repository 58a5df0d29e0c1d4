"""Idempotent record of applied staff decisions.

A decision is written as ``APPLIED`` once the role grant (if any) has gone
through and before the applicant is notified, then moved to ``NOTIFIED`` or
``NOTIFY_FAILED``. A half-applied decision is therefore visible in the table
even if the process dies between the two steps.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Final

from .models import Decision

DECISION_PREFIX: Final[str] = "DECISION_"

STATUS_APPLIED: Final[str] = "APPLIED"
STATUS_NOTIFIED: Final[str] = "NOTIFIED"
STATUS_NOTIFY_FAILED: Final[str] = "NOTIFY_FAILED"

log: Final = logging.getLogger("registration-gateway")


class DecisionLedger:
    def __init__(self, table) -> None:
        self._table = table

    @property
    def enabled(self) -> bool:
        return self._table is not None

    @staticmethod
    def key(applicant_id: str) -> dict[str, str]:
        return {"discord_id": f"{DECISION_PREFIX}{applicant_id}"}

    async def record_applied(
        self,
        applicant_id: str,
        decision: Decision,
        *,
        staff_id: int,
        staff_name: str,
        message_id: int | None,
        now: datetime,
    ) -> None:
        if self._table is None:
            return

        try:
            self._table.put_item(
                Item={
                    **self.key(applicant_id),
                    "applicant_id": applicant_id,
                    "decision": decision.value,
                    "staff_id": str(staff_id),
                    "staff_name": staff_name,
                    "message_id": str(message_id) if message_id else "",
                    "timestamp": now.isoformat(),
                    "status": STATUS_APPLIED,
                }
            )
            log.info(
                "Recorded %s decision for %s by %s",
                decision.value,
                applicant_id,
                staff_name,
            )
        except Exception as exc:  # pylint: disable=broad-except
            log.exception("Failed to record decision for %s: %s", applicant_id, exc)

    async def mark_notified(self, applicant_id: str, *, delivered: bool) -> None:
        if self._table is None:
            return

        status = STATUS_NOTIFIED if delivered else STATUS_NOTIFY_FAILED
        try:
            self._table.update_item(
                Key=self.key(applicant_id),
                UpdateExpression="SET #st = :status",
                ExpressionAttributeNames={"#st": "status"},
                ExpressionAttributeValues={":status": status},
            )
        except Exception as exc:  # pylint: disable=broad-except
            log.exception(
                "Failed to update decision status for %s: %s", applicant_id, exc
            )

    async def get(self, applicant_id: str) -> dict | None:
        if self._table is None:
            return None

        try:
            response = self._table.get_item(Key=self.key(applicant_id))
        except Exception as exc:  # pylint: disable=broad-except
            log.exception("Failed to load decision for %s: %s", applicant_id, exc)
            return None
        return response.get("Item")
