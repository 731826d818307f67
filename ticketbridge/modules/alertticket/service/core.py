"""Alert ticket service: policy lookup, client selection and request deadline."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable

from ticketbridge.modules.alertticket.domain import ActionOutcome, AlertGroup, ReceiverPolicy
from ticketbridge.modules.alertticket.metrics import MetricsSink, NullMetricsSink, emit
from ticketbridge.modules.alertticket.provider import TicketClientRegistry
from ticketbridge.modules.alertticket.repositories import PolicyRepository
from ticketbridge.modules.alertticket.service.reconciler import Reconciler
from ticketbridge.modules.alertticket.template import TemplateSet
from ticketbridge.modules.alertticket.util import (
    MetricEvent,
    RemoteProtocolError,
    UnknownReceiverError,
    now,
)
from ticketbridge.modules.alertticket.util.fingerprint import fingerprint
from ticketbridge.modules.alertticket.util.locks import KeyedLock
from ticketbridge.settings import Settings

log = logging.getLogger(__name__)


class AlertTicketService:
    def __init__(
        self,
        settings: Settings,
        policies: PolicyRepository,
        clients: TicketClientRegistry,
        templates: TemplateSet | None = None,
        metrics: MetricsSink | None = None,
        clock: Callable[[], datetime] = now,
    ) -> None:
        self.settings = settings
        self.policies = policies
        self.clients = clients
        self.templates = templates or TemplateSet.default()
        self.metrics = metrics or NullMetricsSink()
        self.clock = clock
        self._locks = KeyedLock()

    async def notify(self, group: AlertGroup) -> ActionOutcome:
        policy = self.policies.policy_for_receiver(group.receiver)
        connection = self.policies.connection_for_receiver(group.receiver)
        if policy is None or connection is None:
            log.error("no configuration for receiver %s", group.receiver)
            raise UnknownReceiverError(group.receiver)

        reconciler = Reconciler(
            self.clients.get(connection),
            self.templates,
            metrics=self.metrics,
            clock=self.clock,
        )
        hashed = self.settings.hash_jira_label
        try:
            outcome = await asyncio.wait_for(
                self._serialized(reconciler, group, policy, hashed),
                timeout=self.settings.request_timeout_seconds,
            )
        except asyncio.TimeoutError:
            error = RemoteProtocolError(
                f"reconciliation for receiver {policy.name} exceeded "
                f"{self.settings.request_timeout_seconds}s",
                timeout=True,
            )
            log.error("%s", error)
            emit(self.metrics, MetricEvent.ERROR, policy.name, error.kind.value)
            outcome = ActionOutcome.failure(error)

        log.info(
            "notification handled receiver=%s key=%s action=%s retryable=%s error=%s",
            policy.name,
            outcome.ticket_key or "-",
            outcome.action.value,
            outcome.retryable,
            outcome.error,
        )
        return outcome

    async def _serialized(
        self, reconciler: Reconciler, group: AlertGroup, policy: ReceiverPolicy, hashed: bool
    ) -> ActionOutcome:
        if not self.settings.serialize_per_fingerprint:
            return await reconciler.reconcile(group, policy, hashed)
        key = (policy.name, policy.project, fingerprint(group.group_labels, hashed))
        async with self._locks.hold(key):
            return await reconciler.reconcile(group, policy, hashed)

    def record_request(self, receiver: str, status_code: int) -> None:
        emit(self.metrics, MetricEvent.REQUEST, receiver, str(status_code))
