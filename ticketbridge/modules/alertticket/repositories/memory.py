"""In-memory repository implementation."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ticketbridge.modules.alertticket.domain import ReceiverConnection, ReceiverPolicy
from ticketbridge.modules.alertticket.repositories.base import PolicyRepository


class InMemoryPolicyRepository(PolicyRepository):
    """Holds receiver policies built in code, e.g. by tests or embedders."""

    def __init__(
        self,
        policies: Iterable[ReceiverPolicy] = (),
        connections: Iterable[ReceiverConnection] = (),
    ) -> None:
        self.policies: Dict[str, ReceiverPolicy] = {policy.name: policy for policy in policies}
        self.connections: Dict[str, ReceiverConnection] = {conn.name: conn for conn in connections}

    def add(self, policy: ReceiverPolicy, connection: ReceiverConnection | None = None) -> None:
        self.policies[policy.name] = policy
        if connection:
            self.connections[connection.name] = connection

    def policy_for_receiver(self, name: str) -> ReceiverPolicy | None:
        return self.policies.get(name)

    def connection_for_receiver(self, name: str) -> ReceiverConnection | None:
        return self.connections.get(name)

    def receiver_names(self) -> List[str]:
        return list(self.policies)

    def describe(self) -> Dict[str, Any]:
        receivers = []
        for name, policy in self.policies.items():
            entry = {"name": name, "project": policy.project, "issue_type": policy.issue_type}
            if name in self.connections:
                entry["api_url"] = self.connections[name].api_url
            receivers.append(entry)
        return {"receivers": receivers}
