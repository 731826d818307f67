"""Result of one reconciliation pass."""

from __future__ import annotations

from dataclasses import dataclass

from ticketbridge.modules.alertticket.util.enums import TicketAction
from ticketbridge.modules.alertticket.util.exceptions import ReconcileError, is_retryable


@dataclass(frozen=True)
class ActionOutcome:
    ticket_key: str = ""
    retryable: bool = False
    error: ReconcileError | None = None
    action: TicketAction = TicketAction.NONE

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, ticket_key: str = "", action: TicketAction = TicketAction.NONE) -> "ActionOutcome":
        return cls(ticket_key=ticket_key, action=action)

    @classmethod
    def failure(cls, error: ReconcileError) -> "ActionOutcome":
        return cls(ticket_key="", retryable=is_retryable(error), error=error)
