"""Per-receiver reconciliation policy."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Mapping, Tuple


@dataclass(frozen=True)
class ReceiverPolicy:
    name: str
    project: str
    issue_type: str
    summary: str
    description: str = ""
    priority: str | None = None
    components: Tuple[str, ...] = ()
    fields: Mapping[str, Any] = field(default_factory=dict)
    add_group_labels: bool = False
    auto_resolve_state: str | None = None
    reopen_state: str | None = None
    wont_fix_resolution: str | None = None
    reopen_window: timedelta | None = None


@dataclass(frozen=True)
class ReceiverConnection:
    """Where and how a receiver reaches its ticket system."""

    name: str
    api_url: str
    user: str | None = None
    password: str | None = field(default=None, repr=False)
    personal_access_token: str | None = field(default=None, repr=False)
