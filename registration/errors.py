"""Failure taxonomy for registration intake and staff decisions."""

from __future__ import annotations

from datetime import timedelta

from .cooldowns import format_remaining


class RegistrationError(Exception):
    """Base exception for failures surfaced to the HTTP caller."""

    status: int = 500
    message: str = "An internal server error occurred."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidApplication(RegistrationError):
    """Raised when the submitted form payload is malformed or incomplete."""

    status = 400
    message = "Invalid registration payload."


class RateLimited(RegistrationError):
    """Raised when the applicant is still inside their cooldown window."""

    status = 429

    def __init__(self, remaining: timedelta) -> None:
        self.remaining = remaining
        super().__init__(
            "You have already submitted a registration. "
            f"Please try again in {format_remaining(remaining)}."
        )


class ChannelUnavailable(RegistrationError):
    """Raised when the review channel cannot be resolved."""

    status = 500
    message = "Discord channel not found."


class DeliveryFailed(RegistrationError):
    """Raised when posting the decision prompt fails."""

    status = 500
    message = "An internal server error occurred."


class DecisionError(Exception):
    """Base exception for failures reported back to the acting staff member."""

    def __init__(self, staff_message: str) -> None:
        self.staff_message = staff_message
        super().__init__(staff_message)


class MemberNotFound(DecisionError):
    def __init__(self, applicant_id: str) -> None:
        self.applicant_id = applicant_id
        super().__init__(
            f'❌ Could not find user with Discord ID "{applicant_id}". '
            "They may have left the server or changed their account."
        )


class ConfigurationError(DecisionError):
    pass


class DirectMessageDisabled(DecisionError):
    def __init__(self, member_label: str) -> None:
        self.member_label = member_label
        super().__init__(
            f"⚠️ Could not send a DM to {member_label}. They may have DMs disabled."
        )


class AlreadyDecided(DecisionError):
    def __init__(self, applicant_id: str, decision: str, staff_name: str) -> None:
        self.applicant_id = applicant_id
        self.decision = decision
        verb = "accepted" if decision == "accept" else "denied"
        super().__init__(
            f"ℹ️ This registration for {applicant_id} was already {verb} "
            f"by {staff_name or 'another staff member'}."
        )
