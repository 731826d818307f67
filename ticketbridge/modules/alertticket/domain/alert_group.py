"""Alert group snapshot delivered by one webhook notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from ticketbridge.modules.alertticket.domain.label_set import LabelSet
from ticketbridge.modules.alertticket.util.enums import AlertStatus


def _is_firing(status: str) -> bool:
    return status in (AlertStatus.FIRING.value, "")


@dataclass(frozen=True)
class Alert:
    status: str = AlertStatus.FIRING.value
    labels: LabelSet = field(default_factory=LabelSet)
    annotations: LabelSet = field(default_factory=LabelSet)
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    generator_url: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "labels", LabelSet.of(self.labels))
        object.__setattr__(self, "annotations", LabelSet.of(self.annotations))

    @property
    def firing(self) -> bool:
        return _is_firing(self.status)


class Alerts(tuple):
    """Tuple of alerts with the helpers templates rely on."""

    def firing(self) -> "Alerts":
        return Alerts(alert for alert in self if alert.firing)

    def resolved(self) -> "Alerts":
        return Alerts(alert for alert in self if not alert.firing)


@dataclass(frozen=True)
class AlertGroup:
    receiver: str
    status: str = AlertStatus.FIRING.value
    alerts: Alerts = field(default_factory=Alerts)
    group_labels: LabelSet = field(default_factory=LabelSet)
    common_labels: LabelSet = field(default_factory=LabelSet)
    common_annotations: LabelSet = field(default_factory=LabelSet)
    external_url: str = ""
    group_key: str = ""
    version: str = "4"

    def __post_init__(self) -> None:
        if not self.status:
            object.__setattr__(self, "status", AlertStatus.FIRING.value)
        if not isinstance(self.alerts, Alerts):
            object.__setattr__(self, "alerts", Alerts(self.alerts))
        for name in ("group_labels", "common_labels", "common_annotations"):
            object.__setattr__(self, name, LabelSet.of(getattr(self, name)))

    @property
    def has_firing(self) -> bool:
        return any(alert.firing for alert in self.alerts)

    def template_context(self) -> Dict[str, Any]:
        return {
            "receiver": self.receiver,
            "status": self.status,
            "alerts": self.alerts,
            "group_labels": self.group_labels,
            "common_labels": self.common_labels,
            "common_annotations": self.common_annotations,
            "external_url": self.external_url,
            "group_key": self.group_key,
            "version": self.version,
        }
