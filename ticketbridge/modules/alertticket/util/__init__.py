"""Utility modules for the alert ticket module."""

from .constants import AlertTicketConstant, JiraApi
from .enums import AlertStatus, ErrorKind, MetricEvent, TicketAction
from .exceptions import (
    ConfigError,
    ReconcileError,
    RemoteProtocolError,
    RemoteRejectedError,
    RemoteTransientError,
    StateConflictError,
    TemplateError,
    UnknownReceiverError,
    is_retryable,
)
from .utils import mask_secrets, now, parse_duration, parse_jira_datetime

__all__ = [
    "AlertTicketConstant",
    "JiraApi",
    "AlertStatus",
    "ErrorKind",
    "MetricEvent",
    "TicketAction",
    "ConfigError",
    "ReconcileError",
    "RemoteProtocolError",
    "RemoteRejectedError",
    "RemoteTransientError",
    "StateConflictError",
    "TemplateError",
    "UnknownReceiverError",
    "is_retryable",
    "mask_secrets",
    "now",
    "parse_duration",
    "parse_jira_datetime",
]
