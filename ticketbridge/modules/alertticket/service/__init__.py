"""Service exports."""

from .core import AlertTicketService
from .lookup import TicketLookup, build_query, most_recently_resolved
from .reconciler import Reconciler

__all__ = [
    "AlertTicketService",
    "TicketLookup",
    "build_query",
    "most_recently_resolved",
    "Reconciler",
]
