"""Metrics sinks receiving reconciliation events."""

from __future__ import annotations

import logging
from typing import Dict, Protocol, Tuple

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, generate_latest

from ticketbridge.modules.alertticket.util import MetricEvent

log = logging.getLogger(__name__)


class MetricsSink(Protocol):
    def increment(self, name: str, *label_values: str) -> None:
        ...


class NullMetricsSink:
    def increment(self, name: str, *label_values: str) -> None:
        return None


class PrometheusMetricsSink:
    """Counters kept in a registry owned by the sink instance."""

    def __init__(self, namespace: str = "ticketbridge", registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        requests = Counter(
            "requests_total",
            "Requests processed, by receiver and status code.",
            labelnames=["receiver", "code"],
            namespace=namespace,
            registry=self.registry,
        )
        actions = Counter(
            "ticket_actions_total",
            "Ticket mutations, by receiver and action.",
            labelnames=["receiver", "action"],
            namespace=namespace,
            registry=self.registry,
        )
        ambiguous = Counter(
            "ambiguous_search_total",
            "Searches that matched more than one ticket.",
            labelnames=["receiver"],
            namespace=namespace,
            registry=self.registry,
        )
        errors = Counter(
            "errors_total",
            "Reconciliation errors, by receiver and error kind.",
            labelnames=["receiver", "kind"],
            namespace=namespace,
            registry=self.registry,
        )
        self._counters: Dict[str, Tuple[Counter, Tuple[str, ...]]] = {
            MetricEvent.REQUEST.value: (requests, ()),
            MetricEvent.TICKET_CREATED.value: (actions, ("created",)),
            MetricEvent.TICKET_UPDATED.value: (actions, ("updated",)),
            MetricEvent.TICKET_RESOLVED.value: (actions, ("resolved",)),
            MetricEvent.TICKET_REOPENED.value: (actions, ("reopened",)),
            MetricEvent.AMBIGUOUS_SEARCH.value: (ambiguous, ()),
            MetricEvent.ERROR.value: (errors, ()),
        }

    def increment(self, name: str, *label_values: str) -> None:
        entry = self._counters.get(getattr(name, "value", name))
        if entry is None:
            log.warning("unknown metric event %s", name)
            return
        counter, fixed = entry
        receiver, *rest = label_values
        counter.labels(receiver, *rest, *fixed).inc()

    def exposition(self) -> tuple[bytes, str]:
        return generate_latest(self.registry), CONTENT_TYPE_LATEST


def emit(sink: MetricsSink, event: MetricEvent, *label_values: str) -> None:
    """Forward an event to the sink; a failing sink never fails the caller."""
    try:
        sink.increment(event.value, *label_values)
    except Exception:  # noqa: BLE001
        log.exception("metrics sink failed on %s", event.value)
