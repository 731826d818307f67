"""Reconciliation of one alert group against the ticket system.

The state of an alert group is derived fresh on every call from the remote
ticket (or its absence) and the group's firing alerts; nothing is kept
between calls. Rules, in order:

1. No ticket: create one when at least one alert is firing, otherwise do
   nothing.
2. Ticket found: bring summary and description up to date, each with its own
   update call and only when it drifted.
3. No firing alerts: run the auto-resolve transition when configured.
4. Firing and the ticket is still open: nothing else to do.
5. Firing and the ticket is done: keep it closed when resolved as won't fix or
   when it was resolved longer ago than the reopen window, otherwise reopen.

Remote calls are independent; a failure after a partial update leaves a well
formed ticket and the next delivery recomputes the same deltas.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, List

from ticketbridge.modules.alertticket.domain import (
    ActionOutcome,
    AlertGroup,
    ReceiverPolicy,
    TicketDraft,
    TicketRef,
)
from ticketbridge.modules.alertticket.metrics import MetricsSink, NullMetricsSink, emit
from ticketbridge.modules.alertticket.provider import TicketClient
from ticketbridge.modules.alertticket.service.lookup import TicketLookup
from ticketbridge.modules.alertticket.template import TemplateSet, render_fields
from ticketbridge.modules.alertticket.util import (
    MetricEvent,
    ReconcileError,
    StateConflictError,
    TicketAction,
    now,
)
from ticketbridge.modules.alertticket.util.fingerprint import fingerprint, quote

log = logging.getLogger(__name__)


class Reconciler:
    def __init__(
        self,
        client: TicketClient,
        templates: TemplateSet,
        metrics: MetricsSink | None = None,
        clock: Callable[[], datetime] = now,
    ) -> None:
        self.client = client
        self.templates = templates
        self.metrics = metrics or NullMetricsSink()
        self.clock = clock
        self.lookup = TicketLookup(client, self.metrics)

    async def reconcile(self, group: AlertGroup, policy: ReceiverPolicy, hashed: bool = False) -> ActionOutcome:
        try:
            return await self._reconcile(group, policy, hashed)
        except ReconcileError as exc:
            outcome = ActionOutcome.failure(exc)
            log.error(
                "reconciliation failed receiver=%s kind=%s retryable=%s err=%s",
                policy.name,
                exc.kind.value,
                outcome.retryable,
                exc,
            )
            emit(self.metrics, MetricEvent.ERROR, policy.name, exc.kind.value)
            return outcome

    async def _reconcile(self, group: AlertGroup, policy: ReceiverPolicy, hashed: bool) -> ActionOutcome:
        project = self.templates.render(policy.project, group)
        label = fingerprint(group.group_labels, hashed)
        # titles follow the group state even on otherwise idle tickets
        summary = self.templates.render(policy.summary, group)
        description = self.templates.render(policy.description, group)

        ticket = await self.lookup.find(project, label, receiver=policy.name)
        if ticket is None:
            return await self._create_if_firing(group, policy, project, label, summary, description)
        return await self._reconcile_existing(group, policy, ticket, label, summary, description)

    async def _create_if_firing(
        self,
        group: AlertGroup,
        policy: ReceiverPolicy,
        project: str,
        label: str,
        summary: str,
        description: str,
    ) -> ActionOutcome:
        if not group.has_firing:
            log.debug("no firing alert and no issue, nothing to do label=%s", label)
            return ActionOutcome.success()

        log.info("no issue found, creating a new one label=%s", label)
        draft = TicketDraft(
            project=project,
            issue_type=self.templates.render(policy.issue_type, group),
            summary=summary,
            description=description,
            labels=self._labels(group, policy, label),
            fields=render_fields(policy.fields, self.templates, group),
        )
        if policy.priority:
            draft.priority = self.templates.render(policy.priority, group)
        draft.components = [self.templates.render(component, group) for component in policy.components]

        created = await self.client.create(draft)
        log.info("issue created key=%s id=%s", created.key, created.id)
        emit(self.metrics, MetricEvent.TICKET_CREATED, policy.name)
        return ActionOutcome.success(created.key, TicketAction.CREATED)

    async def _reconcile_existing(
        self,
        group: AlertGroup,
        policy: ReceiverPolicy,
        ticket: TicketRef,
        label: str,
        summary: str,
        description: str,
    ) -> ActionOutcome:
        action = TicketAction.NONE
        if ticket.summary != summary:
            await self._update(ticket.key, {"summary": summary}, policy)
            action = TicketAction.UPDATED
        if ticket.description != description:
            await self._update(ticket.key, {"description": description}, policy)
            action = TicketAction.UPDATED

        if not group.has_firing:
            if policy.auto_resolve_state:
                log.debug("no firing alert, resolving issue key=%s label=%s", ticket.key, label)
                await self._transition(ticket.key, policy.auto_resolve_state)
                log.info("issue resolved key=%s", ticket.key)
                emit(self.metrics, MetricEvent.TICKET_RESOLVED, policy.name)
                return ActionOutcome.success(ticket.key, TicketAction.RESOLVED)
            log.debug("no firing alert, summary checked, nothing else to do key=%s", ticket.key)
            return ActionOutcome.success(ticket.key, action)

        if not ticket.is_done:
            log.debug("issue is unresolved, all is done key=%s label=%s", ticket.key, label)
            return ActionOutcome.success(ticket.key, action)

        if policy.wont_fix_resolution and ticket.resolution == policy.wont_fix_resolution:
            log.info(
                "issue was resolved as won't fix, not reopening key=%s resolution=%s",
                ticket.key,
                ticket.resolution,
            )
            return ActionOutcome.success(ticket.key, action)

        if self._outside_reopen_window(ticket, policy):
            log.info(
                "issue was resolved too long ago to reopen key=%s resolved=%s window=%s",
                ticket.key,
                ticket.resolution_date.isoformat(),
                policy.reopen_window,
            )
            return ActionOutcome.success(ticket.key, action)

        if not policy.reopen_state:
            log.warning("issue %s is resolved but no reopen state is configured", ticket.key)
            return ActionOutcome.success(ticket.key, action)

        log.info("issue was recently resolved, reopening key=%s label=%s", ticket.key, label)
        await self._transition(ticket.key, policy.reopen_state)
        emit(self.metrics, MetricEvent.TICKET_REOPENED, policy.name)
        return ActionOutcome.success(ticket.key, TicketAction.REOPENED)

    def _outside_reopen_window(self, ticket: TicketRef, policy: ReceiverPolicy) -> bool:
        if not policy.reopen_window or ticket.resolution_date is None:
            return False
        return ticket.resolution_date + policy.reopen_window < self.clock()

    @staticmethod
    def _labels(group: AlertGroup, policy: ReceiverPolicy, label: str) -> List[str]:
        labels = [label]
        if policy.add_group_labels:
            labels.extend(f"{pair.name}={quote(pair.value)}" for pair in group.group_labels.sorted_pairs())
        return labels

    async def _update(self, ticket_key: str, fields: Dict[str, str], policy: ReceiverPolicy) -> None:
        log.debug("updating issue key=%s fields=%s", ticket_key, sorted(fields))
        await self.client.update(ticket_key, fields)
        emit(self.metrics, MetricEvent.TICKET_UPDATED, policy.name)

    async def _transition(self, ticket_key: str, state: str) -> None:
        transitions = await self.client.get_transitions(ticket_key)
        for transition in transitions:
            if transition.name == state:
                log.debug("transition %s key=%s id=%s", state, ticket_key, transition.id)
                await self.client.do_transition(ticket_key, transition.id)
                return
        raise StateConflictError(
            f"JIRA state {state!r} does not exist or no transition possible for {ticket_key}",
            transition=state,
            ticket_key=ticket_key,
        )
