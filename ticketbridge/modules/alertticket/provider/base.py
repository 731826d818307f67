"""Ticket system capability consumed by the reconciler."""

from __future__ import annotations

from typing import Any, List, Mapping, Protocol, Sequence

from ticketbridge.modules.alertticket.domain import TicketDraft, TicketRef, Transition


class TicketClient(Protocol):
    """Operations the reconciler needs from a ticket backend.

    Implementations raise the :class:`ReconcileError` subclasses so callers get
    a retry classification for every failure.
    """

    async def search(self, jql: str, fields: Sequence[str], max_results: int) -> List[TicketRef]:
        ...

    async def get_transitions(self, ticket_key: str) -> List[Transition]:
        ...

    async def create(self, draft: TicketDraft) -> TicketRef:
        ...

    async def update(self, ticket_key: str, fields: Mapping[str, Any]) -> None:
        ...

    async def do_transition(self, ticket_key: str, transition_id: str) -> None:
        ...

    async def aclose(self) -> None:
        ...
