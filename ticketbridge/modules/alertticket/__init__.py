"""Alert group to ticket reconciliation."""

from .service import AlertTicketService

__all__ = ["AlertTicketService"]
