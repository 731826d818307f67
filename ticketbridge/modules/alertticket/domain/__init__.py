"""Domain exports for the alert ticket module."""

from .alert_group import Alert, AlertGroup, Alerts
from .label_set import LabelSet, Pair
from .outcome import ActionOutcome
from .receiver_policy import ReceiverConnection, ReceiverPolicy
from .ticket import TicketDraft, TicketRef, Transition

__all__ = [
    "Alert",
    "AlertGroup",
    "Alerts",
    "LabelSet",
    "Pair",
    "ActionOutcome",
    "ReceiverConnection",
    "ReceiverPolicy",
    "TicketDraft",
    "TicketRef",
    "Transition",
]
