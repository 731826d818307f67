import asyncio

import pytest

from conftest import FakeTicketClient, RecordingMetricsSink, build_group, build_policy
from ticketbridge.modules.alertticket import AlertTicketService
from ticketbridge.modules.alertticket.domain import ReceiverConnection
from ticketbridge.modules.alertticket.provider import TicketClientRegistry
from ticketbridge.modules.alertticket.repositories import InMemoryPolicyRepository
from ticketbridge.modules.alertticket.util import RemoteProtocolError, TicketAction, UnknownReceiverError
from ticketbridge.settings import Settings


class SlowTicketClient(FakeTicketClient):
    def __init__(self, delay: float, **kwargs) -> None:
        super().__init__(**kwargs)
        self.delay = delay
        self.active = 0
        self.max_active = 0

    async def search(self, jql, fields, max_results):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.active -= 1
        return await super().search(jql, fields, max_results)


def build_service(client, metrics=None, **overrides) -> AlertTicketService:
    settings = Settings(_env_file=None, **overrides)
    policies = InMemoryPolicyRepository(
        policies=[build_policy()],
        connections=[ReceiverConnection(name="jira-ops", api_url="https://jira.example.com", user="u", password="p")],
    )
    clients = TicketClientRegistry()
    clients.register("jira-ops", client)
    return AlertTicketService(settings, policies, clients, metrics=metrics)


def test_notify_creates_ticket():
    client = FakeTicketClient(created_key="OPS-12")
    outcome = asyncio.run(build_service(client).notify(build_group()))
    assert outcome.ticket_key == "OPS-12"
    assert outcome.action is TicketAction.CREATED


def test_notify_uses_hashed_label_when_enabled():
    client = FakeTicketClient()
    asyncio.run(build_service(client, hash_jira_label=True).notify(build_group()))
    assert client.created[0].labels[0].startswith("JIRALERT{")


def test_unknown_receiver_raises():
    service = build_service(FakeTicketClient())
    with pytest.raises(UnknownReceiverError) as excinfo:
        asyncio.run(service.notify(build_group(receiver="nobody")))
    assert str(excinfo.value) == "receiver missing: nobody"


def test_deadline_turns_into_retryable_timeout():
    metrics = RecordingMetricsSink()
    client = SlowTicketClient(delay=1.0)
    service = build_service(client, metrics=metrics, request_timeout_seconds=0.05)
    outcome = asyncio.run(service.notify(build_group()))

    assert isinstance(outcome.error, RemoteProtocolError)
    assert outcome.error.timeout
    assert outcome.retryable
    assert client.created == []
    assert metrics.events == [("error", "jira-ops", "protocol")]


def test_same_group_is_serialized():
    client = SlowTicketClient(delay=0.02)
    service = build_service(client)

    async def run():
        return await asyncio.gather(service.notify(build_group()), service.notify(build_group()))

    asyncio.run(run())
    assert client.max_active == 1
    assert len(service._locks) == 0


def test_serialization_can_be_disabled():
    client = SlowTicketClient(delay=0.02)
    service = build_service(client, serialize_per_fingerprint=False)

    async def run():
        return await asyncio.gather(service.notify(build_group()), service.notify(build_group()))

    asyncio.run(run())
    assert client.max_active == 2


def test_different_groups_run_concurrently():
    client = SlowTicketClient(delay=0.02)
    service = build_service(client)
    other = build_group(group_labels={"alertname": "DiskFull"})

    async def run():
        return await asyncio.gather(service.notify(build_group()), service.notify(other))

    asyncio.run(run())
    assert client.max_active == 2


def test_record_request_counts_status():
    metrics = RecordingMetricsSink()
    build_service(FakeTicketClient(), metrics=metrics).record_request("jira-ops", 503)
    assert metrics.events == [("request", "jira-ops", "503")]
