"""Ticket clients per receiver."""

from __future__ import annotations

import logging
from typing import Callable, Dict

import httpx

from ticketbridge.modules.alertticket.domain import ReceiverConnection
from ticketbridge.modules.alertticket.provider.base import TicketClient
from ticketbridge.modules.alertticket.provider.jira import JiraTicketClient

log = logging.getLogger(__name__)

ClientFactory = Callable[[ReceiverConnection, httpx.AsyncClient], TicketClient]


def jira_client_factory(connection: ReceiverConnection, client: httpx.AsyncClient) -> TicketClient:
    return JiraTicketClient(
        connection.api_url,
        user=connection.user,
        password=connection.password,
        personal_access_token=connection.personal_access_token,
        client=client,
    )


class TicketClientRegistry:
    """Builds one client per receiver and reuses it, sharing a connection pool."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        factory: ClientFactory = jira_client_factory,
        timeout: float = 10,
    ) -> None:
        self._clients: Dict[str, TicketClient] = {}
        self._http = client or httpx.AsyncClient(timeout=timeout)
        self._factory = factory

    def register(self, receiver: str, client: TicketClient) -> None:
        self._clients[receiver] = client

    def get(self, connection: ReceiverConnection) -> TicketClient:
        if connection.name not in self._clients:
            log.debug("creating ticket client for receiver %s (%s)", connection.name, connection.api_url)
            self._clients[connection.name] = self._factory(connection, self._http)
        return self._clients[connection.name]

    async def aclose(self) -> None:
        for client in self._clients.values():
            await client.aclose()
        self._clients.clear()
        await self._http.aclose()
