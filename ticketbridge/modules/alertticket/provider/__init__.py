"""Ticket system providers."""

from .base import TicketClient
from .jira import JiraTicketClient
from .registry import TicketClientRegistry, jira_client_factory

__all__ = [
    "TicketClient",
    "JiraTicketClient",
    "TicketClientRegistry",
    "jira_client_factory",
]
