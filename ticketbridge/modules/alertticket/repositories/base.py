"""Repository contracts for receiver configuration."""

from __future__ import annotations

from typing import Any, Dict, List

from ticketbridge.modules.alertticket.domain import ReceiverConnection, ReceiverPolicy


class PolicyRepository:
    def policy_for_receiver(self, name: str) -> ReceiverPolicy | None:
        raise NotImplementedError

    def connection_for_receiver(self, name: str) -> ReceiverConnection | None:
        raise NotImplementedError

    def receiver_names(self) -> List[str]:
        raise NotImplementedError

    def describe(self) -> Dict[str, Any]:
        raise NotImplementedError
