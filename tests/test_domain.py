from datetime import datetime, timezone

from ticketbridge.modules.alertticket.domain import (
    ActionOutcome,
    Alert,
    AlertGroup,
    LabelSet,
    TicketRef,
)
from ticketbridge.modules.alertticket.util import (
    RemoteProtocolError,
    RemoteRejectedError,
    RemoteTransientError,
    StateConflictError,
    TemplateError,
    TicketAction,
    is_retryable,
)


def test_label_set_canonical_order():
    labels = LabelSet({"zone": "b", "alertname": "X", "app": "web"})
    assert list(labels) == ["alertname", "app", "zone"]
    assert [pair.name for pair in labels.sorted_pairs()] == ["alertname", "app", "zone"]
    assert list(labels.values()) == ["X", "web", "b"]


def test_label_set_without_alertname_is_sorted():
    assert LabelSet({"b": "1", "a": "2"}).names() == ["a", "b"]


def test_label_set_remove_and_equality():
    labels = LabelSet({"alertname": "X", "env": "prod", "team": "sre"})
    assert labels.remove(["env", "alertname"]).to_dict() == {"team": "sre"}
    assert labels == {"team": "sre", "env": "prod", "alertname": "X"}
    assert hash(labels) == hash(LabelSet({"team": "sre", "alertname": "X", "env": "prod"}))


def test_label_set_coerces_values():
    labels = LabelSet({"port": 9100, "empty": None})
    assert labels["port"] == "9100"
    assert labels["empty"] == ""


def test_alert_firing_states():
    assert Alert(status="firing").firing
    assert Alert(status="").firing
    assert not Alert(status="resolved").firing


def test_group_alert_helpers_and_status_default():
    group = AlertGroup(
        receiver="r",
        status="",
        alerts=[Alert(status="firing"), Alert(status="resolved"), Alert(status="resolved")],
        group_labels={"alertname": "X"},
    )
    assert group.status == "firing"
    assert len(group.alerts.firing()) == 1
    assert len(group.alerts.resolved()) == 2
    assert group.has_firing
    assert isinstance(group.group_labels, LabelSet)


def test_group_without_firing_alerts():
    group = AlertGroup(receiver="r", status="resolved", alerts=[Alert(status="resolved")])
    assert not group.has_firing
    assert AlertGroup(receiver="r").has_firing is False


def test_ticket_ref_done_category():
    resolved_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert TicketRef(key="OPS-1", status_category="done", resolution_date=resolved_at).is_done
    assert not TicketRef(key="OPS-1", status_category="indeterminate").is_done


def test_retry_classification():
    assert is_retryable(RemoteTransientError("boom", status_code=502))
    assert is_retryable(RemoteProtocolError("slow", timeout=True))
    assert not is_retryable(RemoteProtocolError("garbage"))
    assert not is_retryable(RemoteRejectedError("nope", status_code=400))
    assert not is_retryable(StateConflictError("no such transition"))
    assert not is_retryable(TemplateError("bad"))
    assert not is_retryable(ValueError("other"))
    assert not is_retryable(None)


def test_outcome_failure_and_success():
    failure = ActionOutcome.failure(RemoteTransientError("boom", status_code=503))
    assert not failure.ok
    assert failure.retryable
    assert failure.ticket_key == ""

    success = ActionOutcome.success("OPS-3", TicketAction.REOPENED)
    assert success.ok
    assert not success.retryable
    assert success.action is TicketAction.REOPENED
