"""Read model of remote tickets and the payloads sent to create them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Tuple

from ticketbridge.modules.alertticket.util.constants import AlertTicketConstant


@dataclass(frozen=True)
class TicketRef:
    key: str
    id: str = ""
    summary: str = ""
    description: str = ""
    labels: Tuple[str, ...] = ()
    status_category: str = ""
    resolution: str | None = None
    resolution_date: datetime | None = None

    @property
    def is_done(self) -> bool:
        return self.status_category == AlertTicketConstant.STATUS_CATEGORY_DONE


@dataclass
class TicketDraft:
    project: str
    issue_type: str
    summary: str
    description: str = ""
    labels: List[str] = field(default_factory=list)
    priority: str | None = None
    components: List[str] = field(default_factory=list)
    fields: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Transition:
    id: str
    name: str
