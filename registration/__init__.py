"""Core registration workflow for the tournament gateway.

The HTTP and Discord runtime in ``gateway`` wires these pieces together; the
modules here hold the intake, cooldown and decision logic so they can be
exercised without a live Discord connection.
"""

from .cooldowns import (
    COOLDOWN_PERIOD,
    DynamoCooldownStore,
    InMemoryCooldownStore,
    format_remaining,
)
from .decisions import DecisionHandler, MemberDirectory
from .errors import (
    AlreadyDecided,
    ChannelUnavailable,
    ConfigurationError,
    DecisionError,
    DeliveryFailed,
    DirectMessageDisabled,
    InvalidApplication,
    MemberNotFound,
    RateLimited,
    RegistrationError,
)
from .intake import Accepted, RegistrationIntake
from .ledger import DecisionLedger
from .models import ActionToken, Application, Decision

__all__ = [
    "COOLDOWN_PERIOD",
    "DynamoCooldownStore",
    "InMemoryCooldownStore",
    "format_remaining",
    "DecisionHandler",
    "MemberDirectory",
    "AlreadyDecided",
    "ChannelUnavailable",
    "ConfigurationError",
    "DecisionError",
    "DeliveryFailed",
    "DirectMessageDisabled",
    "InvalidApplication",
    "MemberNotFound",
    "RateLimited",
    "RegistrationError",
    "Accepted",
    "RegistrationIntake",
    "DecisionLedger",
    "ActionToken",
    "Application",
    "Decision",
]
