"""Search for the ticket owning an alert group."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Sequence

from ticketbridge.modules.alertticket.domain import TicketRef
from ticketbridge.modules.alertticket.metrics import MetricsSink, NullMetricsSink, emit
from ticketbridge.modules.alertticket.provider import TicketClient
from ticketbridge.modules.alertticket.util import AlertTicketConstant, MetricEvent
from ticketbridge.modules.alertticket.util.fingerprint import quote

log = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def build_query(project: str, label: str) -> str:
    return f"project={quote(project)} and labels={quote(label)} order by resolutiondate desc"


def most_recently_resolved(tickets: Sequence[TicketRef]) -> TicketRef:
    """Unresolved tickets rank first; ties keep the server's order."""
    return max(
        tickets,
        key=lambda ticket: (ticket.resolution_date is None, ticket.resolution_date or _EPOCH),
    )


class TicketLookup:
    def __init__(self, client: TicketClient, metrics: MetricsSink | None = None) -> None:
        self.client = client
        self.metrics = metrics or NullMetricsSink()

    async def find(self, project: str, label: str, receiver: str = "") -> TicketRef | None:
        query = build_query(project, label)
        log.debug("search query=%s", query)
        tickets: List[TicketRef] = await self.client.search(
            query,
            AlertTicketConstant.SEARCH_FIELDS,
            AlertTicketConstant.SEARCH_MAX_RESULTS,
        )
        if not tickets:
            log.debug("no results for query=%s", query)
            return None

        ticket = most_recently_resolved(tickets)
        if len(tickets) > 1:
            log.warning(
                "more than one issue matched, picking most recently resolved query=%s issues=%s picked=%s",
                query,
                [t.key for t in tickets],
                ticket.key,
            )
            emit(self.metrics, MetricEvent.AMBIGUOUS_SEARCH, receiver)
        log.debug("found issue %s for query=%s", ticket.key, query)
        return ticket
