"""Enumerations for the alert ticket module."""

from __future__ import annotations

from enum import Enum


class AlertStatus(str, Enum):
    FIRING = "firing"
    RESOLVED = "resolved"


class ErrorKind(str, Enum):
    TRANSIENT = "transient"
    REJECTED = "rejected"
    PROTOCOL = "protocol"
    CONFLICT = "conflict"
    TEMPLATE = "template"


class TicketAction(str, Enum):
    NONE = "none"
    CREATED = "created"
    UPDATED = "updated"
    RESOLVED = "resolved"
    REOPENED = "reopened"


class MetricEvent(str, Enum):
    REQUEST = "request"
    TICKET_CREATED = "ticket_created"
    TICKET_UPDATED = "ticket_updated"
    TICKET_RESOLVED = "ticket_resolved"
    TICKET_REOPENED = "ticket_reopened"
    AMBIGUOUS_SEARCH = "ambiguous_search"
    ERROR = "error"
