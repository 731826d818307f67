"""Alertmanager webhook payload."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ticketbridge.modules.alertticket.domain import Alert, AlertGroup, Alerts, LabelSet

# Alertmanager sends the zero time for alerts without an end
_ZERO_TIME_YEAR = 1


class AlertPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)
    starts_at: Optional[datetime] = Field(None, alias="startsAt")
    ends_at: Optional[datetime] = Field(None, alias="endsAt")
    generator_url: str = Field("", alias="generatorURL")
    fingerprint: str = ""

    @field_validator("status", "generator_url", "fingerprint", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Optional[str]) -> str:
        return value or ""

    @field_validator("labels", "annotations", mode="before")
    @classmethod
    def _none_as_empty_map(cls, value: Optional[Dict[str, str]]) -> Dict[str, str]:
        return value or {}

    def to_domain(self) -> Alert:
        ends_at = self.ends_at
        if ends_at is not None and ends_at.year <= _ZERO_TIME_YEAR:
            ends_at = None
        return Alert(
            status=self.status,
            labels=LabelSet(self.labels),
            annotations=LabelSet(self.annotations),
            starts_at=self.starts_at,
            ends_at=ends_at,
            generator_url=self.generator_url,
        )


class AlertmanagerPayload(BaseModel):
    """Full Alertmanager webhook payload."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = "4"
    group_key: str = Field("", alias="groupKey")
    receiver: str = ""
    status: str = ""
    alerts: List[AlertPayload] = Field(default_factory=list)
    group_labels: Dict[str, str] = Field(default_factory=dict, alias="groupLabels")
    common_labels: Dict[str, str] = Field(default_factory=dict, alias="commonLabels")
    common_annotations: Dict[str, str] = Field(default_factory=dict, alias="commonAnnotations")
    external_url: str = Field("", alias="externalURL")

    @field_validator("group_labels", "common_labels", "common_annotations", mode="before")
    @classmethod
    def _none_as_empty_map(cls, value: Optional[Dict[str, str]]) -> Dict[str, str]:
        return value or {}

    @field_validator("alerts", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value: Optional[list]) -> list:
        return value or []

    def to_domain(self) -> AlertGroup:
        return AlertGroup(
            receiver=self.receiver,
            status=self.status,
            alerts=Alerts(alert.to_domain() for alert in self.alerts),
            group_labels=LabelSet(self.group_labels),
            common_labels=LabelSet(self.common_labels),
            common_annotations=LabelSet(self.common_annotations),
            external_url=self.external_url,
            group_key=self.group_key,
            version=self.version,
        )
