"""Service wiring and start-up checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ticketbridge.modules.alertticket import AlertTicketService
from ticketbridge.modules.alertticket.metrics import MetricsSink, PrometheusMetricsSink
from ticketbridge.modules.alertticket.provider import TicketClientRegistry
from ticketbridge.modules.alertticket.repositories import PolicyRepository, YamlPolicyRepository
from ticketbridge.modules.alertticket.template import TemplateSet
from .settings import Settings

log = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Container that wires the alert ticket service with shared settings.

    Components left as ``None`` are built from the settings: receivers from the
    YAML file named by ``config_file``, templates from the file that
    configuration points at (or the built-in set).
    """

    settings: Settings
    policies: PolicyRepository | None = None
    templates: TemplateSet | None = None
    metrics: MetricsSink | None = None
    clients: TicketClientRegistry | None = None
    alert_ticket_service: AlertTicketService = field(init=False)

    def __post_init__(self) -> None:
        if self.policies is None:
            self.policies = YamlPolicyRepository.from_file(self.settings.config_file)
        if self.templates is None:
            self.templates = self._load_templates()
        if self.metrics is None:
            self.metrics = PrometheusMetricsSink()
        if self.clients is None:
            self.clients = TicketClientRegistry(timeout=self.settings.jira_timeout_seconds)
        self.alert_ticket_service = AlertTicketService(
            self.settings,
            policies=self.policies,
            clients=self.clients,
            templates=self.templates,
            metrics=self.metrics,
        )

    def _load_templates(self) -> TemplateSet:
        template_path = getattr(getattr(self.policies, "config", None), "template_path", None)
        if template_path is None:
            log.info("no template file configured, using built-in templates")
            return TemplateSet.default()
        log.info("loading templates from %s", template_path)
        return TemplateSet.load(template_path)


async def bootstrap_services(container: ServiceContainer) -> None:
    log.info("...................RUN...................")
    log.info(
        "receivers=%s hash_jira_label=%s serialize_per_fingerprint=%s",
        ",".join(container.policies.receiver_names()),
        container.settings.hash_jira_label,
        container.settings.serialize_per_fingerprint,
    )
    if not container.settings.hash_jira_label:
        log.warning(
            "Using deprecated jira label generation; labels grow with the group labels "
            "and may exceed Jira's limit. Set TICKETBRIDGE_HASH_JIRA_LABEL=true to switch."
        )


async def shutdown_services(container: ServiceContainer) -> None:
    await container.clients.aclose()
    log.info("ticket clients closed")
