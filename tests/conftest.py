from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence

import pytest

from ticketbridge.modules.alertticket.domain import (
    Alert,
    AlertGroup,
    ReceiverPolicy,
    TicketDraft,
    TicketRef,
    Transition,
)


class FakeTicketClient:
    """Records every call; search results and failures are scripted."""

    def __init__(
        self,
        tickets: Sequence[TicketRef] = (),
        transitions: Sequence[Transition] = (),
        created_key: str = "OPS-1",
    ) -> None:
        self.tickets = list(tickets)
        self.transitions = list(transitions)
        self.created_key = created_key
        self.errors: Dict[str, Exception] = {}
        self.searches: List[tuple] = []
        self.created: List[TicketDraft] = []
        self.updates: List[tuple] = []
        self.transition_lookups: List[str] = []
        self.transitioned: List[tuple] = []
        self.closed = False

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.errors:
            raise self.errors[operation]

    async def search(self, jql: str, fields: Sequence[str], max_results: int) -> List[TicketRef]:
        self.searches.append((jql, tuple(fields), max_results))
        self._maybe_fail("search")
        return list(self.tickets)

    async def get_transitions(self, ticket_key: str) -> List[Transition]:
        self.transition_lookups.append(ticket_key)
        self._maybe_fail("get_transitions")
        return list(self.transitions)

    async def create(self, draft: TicketDraft) -> TicketRef:
        self.created.append(draft)
        self._maybe_fail("create")
        return TicketRef(key=self.created_key, id="10001", summary=draft.summary)

    async def update(self, ticket_key: str, fields: Mapping[str, Any]) -> None:
        self.updates.append((ticket_key, dict(fields)))
        self._maybe_fail("update")

    async def do_transition(self, ticket_key: str, transition_id: str) -> None:
        self.transitioned.append((ticket_key, transition_id))
        self._maybe_fail("do_transition")

    async def aclose(self) -> None:
        self.closed = True

    @property
    def mutations(self) -> int:
        return len(self.created) + len(self.updates) + len(self.transitioned)


class RecordingMetricsSink:
    def __init__(self) -> None:
        self.events: List[tuple] = []

    def increment(self, name: str, *label_values: str) -> None:
        self.events.append((name, *label_values))

    def names(self) -> List[str]:
        return [event[0] for event in self.events]


def build_group(
    status: str = "firing",
    alert_statuses: Sequence[str] = ("firing",),
    group_labels: Mapping[str, str] | None = None,
    receiver: str = "jira-ops",
) -> AlertGroup:
    labels = dict(group_labels or {"alertname": "HighCPU", "env": "prod"})
    alerts = [
        Alert(
            status=alert_status,
            labels={**labels, "instance": f"host-{idx}"},
            annotations={"summary": f"cpu high on host-{idx}"},
            generator_url=f"http://prometheus/graph?g0={idx}",
        )
        for idx, alert_status in enumerate(alert_statuses)
    ]
    return AlertGroup(
        receiver=receiver,
        status=status,
        alerts=alerts,
        group_labels=labels,
        common_labels={**labels, "team": "sre"},
        common_annotations={},
        external_url="http://alertmanager:9093",
    )


def build_policy(**overrides: Any) -> ReceiverPolicy:
    values: Dict[str, Any] = {
        "name": "jira-ops",
        "project": "OPS",
        "issue_type": "Bug",
        "summary": "{{ group_labels.alertname }} firing",
        "description": "{{ alerts.firing() | length }} alerts",
        "reopen_state": "Reopen",
        "wont_fix_resolution": "Won't Fix",
    }
    values.update(overrides)
    return ReceiverPolicy(**values)


@pytest.fixture
def ticket_client() -> FakeTicketClient:
    return FakeTicketClient()


@pytest.fixture
def metrics() -> RecordingMetricsSink:
    return RecordingMetricsSink()
