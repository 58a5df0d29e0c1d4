from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import ClassVar

from .errors import InvalidApplication

TOKEN_DELIMITER = ":"
# Discord caps component custom_id values at 100 characters.
CUSTOM_ID_MAX = 100
EMBED_FIELD_VALUE_MAX = 1024


def utc_now() -> datetime:
    return datetime.now(UTC)


class Decision(str, enum.Enum):
    ACCEPT = "accept"
    DENY = "deny"


@dataclass(frozen=True, slots=True)
class ActionToken:
    """Button payload correlating a staff click with an applicant."""

    decision: Decision
    applicant_id: str

    def encode(self) -> str:
        return f"{self.decision.value}{TOKEN_DELIMITER}{self.applicant_id}"

    @classmethod
    def parse(cls, raw: str | None) -> ActionToken | None:
        """Return the token encoded in ``raw`` or ``None`` for foreign ids."""
        if not raw or TOKEN_DELIMITER not in raw:
            return None
        action, applicant_id = raw.split(TOKEN_DELIMITER, 1)
        try:
            decision = Decision(action)
        except ValueError:
            return None
        if not applicant_id:
            return None
        return cls(decision=decision, applicant_id=applicant_id)


@dataclass(frozen=True, slots=True)
class Application:
    full_name: str
    age: str
    email: str
    ign: str
    applicant_id: str

    FIELD_MAP: ClassVar[dict[str, str]] = {
        "fullName": "full_name",
        "age": "age",
        "email": "email",
        "ign": "ign",
        "discordId": "applicant_id",
    }

    @classmethod
    def from_payload(cls, payload: object) -> Application:
        if not isinstance(payload, Mapping):
            raise InvalidApplication("Registration payload must be a JSON object.")

        values: dict[str, str] = {}
        missing: list[str] = []
        for key, attr in cls.FIELD_MAP.items():
            raw = payload.get(key)
            # bool is an int subclass but never a valid form value.
            if raw is not None and (
                isinstance(raw, bool) or not isinstance(raw, str | int | float)
            ):
                raise InvalidApplication(f"Field '{key}' must be a string.")
            value = "" if raw is None else str(raw).strip()
            if not value:
                missing.append(key)
            values[attr] = value
        if missing:
            raise InvalidApplication("Missing required fields: " + ", ".join(missing))

        applicant_id = values["applicant_id"]
        if TOKEN_DELIMITER in applicant_id:
            raise InvalidApplication(
                f"Discord ID may not contain '{TOKEN_DELIMITER}'."
            )
        longest_action = max(len(decision.value) for decision in Decision)
        if len(applicant_id) + longest_action + len(TOKEN_DELIMITER) > CUSTOM_ID_MAX:
            raise InvalidApplication("Discord ID is too long.")

        return cls(**values)

    def token(self, decision: Decision) -> ActionToken:
        return ActionToken(decision=decision, applicant_id=self.applicant_id)
