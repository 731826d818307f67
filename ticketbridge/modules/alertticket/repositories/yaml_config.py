"""Receiver configuration loaded from a YAML file.

The file has an optional ``template`` path, a ``defaults`` block and a list of
``receivers``. Every field a receiver leaves unset is taken from ``defaults``.

.. code-block:: yaml

    template: ticketbridge.j2
    defaults:
      api_url: https://jira.example.com
      user: bot
      password: secret
      issue_type: Bug
      summary: '{{ jira_summary() }}'
      description: '{{ jira_description() }}'
      reopen_state: To Do
      wont_fix_resolution: Won't Fix
      reopen_duration: 0h
    receivers:
      - name: jira-ab
        project: AB
        add_group_labels: true
        auto_resolve:
          state: Done
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, SecretStr, ValidationError, field_validator

from ticketbridge.modules.alertticket.domain import ReceiverConnection, ReceiverPolicy
from ticketbridge.modules.alertticket.repositories.base import PolicyRepository
from ticketbridge.modules.alertticket.util import ConfigError, mask_secrets, parse_duration

log = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "api_url", "project", "issue_type", "summary", "description", "reopen_state")
SECRET_FIELDS = ("password", "personal_access_token")


def _secret(value: Optional[SecretStr]) -> Optional[str]:
    if value is None:
        return None
    return value.get_secret_value() or None


class AutoResolveConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    state: str


class ReceiverConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    api_url: Optional[str] = None
    user: Optional[str] = None
    password: Optional[SecretStr] = None
    personal_access_token: Optional[SecretStr] = None

    project: Optional[str] = None
    issue_type: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    components: Optional[List[str]] = None
    fields: Optional[Dict[str, Any]] = None
    add_group_labels: Optional[bool] = None

    auto_resolve: Optional[AutoResolveConfig] = None
    reopen_state: Optional[str] = None
    wont_fix_resolution: Optional[str] = None
    reopen_duration: Optional[Union[str, int]] = None

    @field_validator("reopen_duration")
    @classmethod
    def _check_duration(cls, value: Union[str, int, None]) -> Union[str, int, None]:
        if value is not None:
            parse_duration(value)
        return value

    def inherit(self, defaults: "ReceiverConfig") -> "ReceiverConfig":
        skip = {"name"}
        # a receiver choosing its own credentials does not mix in the other kind
        if _secret(self.personal_access_token):
            skip.update(("user", "password"))
        elif self.user or _secret(self.password):
            skip.add("personal_access_token")
        missing = {
            name: getattr(defaults, name)
            for name in type(self).model_fields
            if name not in skip and getattr(self, name) is None and getattr(defaults, name) is not None
        }
        return self.model_copy(update=missing)

    def to_policy(self) -> ReceiverPolicy:
        window = parse_duration(self.reopen_duration)
        return ReceiverPolicy(
            name=self.name or "",
            project=self.project or "",
            issue_type=self.issue_type or "",
            summary=self.summary or "",
            description=self.description or "",
            priority=self.priority or None,
            components=tuple(self.components or ()),
            fields=dict(self.fields or {}),
            add_group_labels=bool(self.add_group_labels),
            auto_resolve_state=self.auto_resolve.state if self.auto_resolve else None,
            reopen_state=self.reopen_state or None,
            wont_fix_resolution=self.wont_fix_resolution or None,
            reopen_window=window or None,
        )

    def to_connection(self) -> ReceiverConnection:
        return ReceiverConnection(
            name=self.name or "",
            api_url=self.api_url or "",
            user=self.user,
            password=_secret(self.password),
            personal_access_token=_secret(self.personal_access_token),
        )


class FileConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    template: Optional[str] = None
    defaults: ReceiverConfig = ReceiverConfig()
    receivers: List[ReceiverConfig] = []


@dataclass
class AlertTicketConfig:
    receivers: Dict[str, ReceiverConfig] = field(default_factory=dict)
    template_path: Path | None = None
    source: Path | None = None


def _validate_receiver(receiver: ReceiverConfig) -> None:
    missing = [name for name in REQUIRED_FIELDS if not getattr(receiver, name)]
    if missing:
        raise ConfigError(f"receiver {receiver.name or '<unnamed>'!r} is missing {', '.join(missing)}")
    token = _secret(receiver.personal_access_token)
    password = _secret(receiver.password)
    if token and (receiver.user or password):
        raise ConfigError(
            f"receiver {receiver.name!r}: personal_access_token and user/password are mutually exclusive"
        )
    if not token and not (receiver.user and password):
        raise ConfigError(f"receiver {receiver.name!r}: missing authentication (user/password or token)")


def parse_config(text: str, base_dir: Path | None = None) -> AlertTicketConfig:
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError("configuration root must be a mapping")
    try:
        parsed = FileConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    if not parsed.receivers:
        raise ConfigError("at least one receiver must be defined")

    receivers: Dict[str, ReceiverConfig] = {}
    for entry in parsed.receivers:
        receiver = entry.inherit(parsed.defaults)
        _validate_receiver(receiver)
        if receiver.name in receivers:
            raise ConfigError(f"duplicate receiver name {receiver.name!r}")
        receivers[receiver.name] = receiver

    template_path = None
    if parsed.template:
        template_path = Path(parsed.template)
        if not template_path.is_absolute() and base_dir is not None:
            template_path = base_dir / template_path
    return AlertTicketConfig(receivers=receivers, template_path=template_path)


def load_config(path: str | Path) -> AlertTicketConfig:
    source = Path(path)
    log.info("loading configuration from %s", source)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read configuration {source}: {exc}") from exc
    config = parse_config(text, base_dir=source.parent)
    config.source = source
    return config


class YamlPolicyRepository(PolicyRepository):
    def __init__(self, config: AlertTicketConfig) -> None:
        self.config = config
        self._policies = {name: receiver.to_policy() for name, receiver in config.receivers.items()}
        self._connections = {name: receiver.to_connection() for name, receiver in config.receivers.items()}

    @classmethod
    def from_file(cls, path: str | Path) -> "YamlPolicyRepository":
        return cls(load_config(path))

    def policy_for_receiver(self, name: str) -> ReceiverPolicy | None:
        return self._policies.get(name)

    def connection_for_receiver(self, name: str) -> ReceiverConnection | None:
        return self._connections.get(name)

    def receiver_names(self) -> List[str]:
        return list(self._policies)

    def describe(self) -> Dict[str, Any]:
        receivers = [
            mask_secrets(receiver.model_dump(mode="json", exclude_none=True), SECRET_FIELDS)
            for receiver in self.config.receivers.values()
        ]
        return {
            "template": str(self.config.template_path) if self.config.template_path else None,
            "receivers": receivers,
        }
