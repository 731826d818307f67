"""Jira REST v2 client."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Sequence, Tuple

import httpx

from ticketbridge.modules.alertticket.domain import TicketDraft, TicketRef, Transition
from ticketbridge.modules.alertticket.util import (
    JiraApi,
    ReconcileError,
    RemoteProtocolError,
    RemoteRejectedError,
    RemoteTransientError,
    parse_jira_datetime,
)

log = logging.getLogger(__name__)


class JiraTicketClient:
    """Async Jira client mapping every failure onto the reconcile error taxonomy."""

    def __init__(
        self,
        api_url: str,
        user: str | None = None,
        password: str | None = None,
        personal_access_token: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10,
    ) -> None:
        self.base_url = api_url.rstrip("/")
        self._auth: Tuple[str, str] | None = None
        self._headers: Dict[str, str] = {"Accept": "application/json"}
        if personal_access_token:
            self._headers["Authorization"] = f"Bearer {personal_access_token}"
        elif user:
            self._auth = (user, password or "")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def search(self, jql: str, fields: Sequence[str], max_results: int) -> List[TicketRef]:
        params = {"jql": jql, "fields": ",".join(fields), "maxResults": max_results}
        data = await self._request("Issue.Search", "GET", JiraApi.SEARCH, params=params)
        try:
            return [self._to_ticket(issue) for issue in self._expect(data, "issues", list)]
        except (AttributeError, ValueError) as exc:
            raise RemoteProtocolError(f"JIRA search returned a malformed issue: {exc}") from exc

    async def get_transitions(self, ticket_key: str) -> List[Transition]:
        path = JiraApi.TRANSITIONS.format(key=ticket_key)
        data = await self._request("Issue.GetTransitions", "GET", path)
        return [
            Transition(id=str(item.get("id", "")), name=str(item.get("name", "")))
            for item in self._expect(data, "transitions", list)
        ]

    async def create(self, draft: TicketDraft) -> TicketRef:
        payload = {"fields": self._draft_fields(draft)}
        data = await self._request("Issue.Create", "POST", JiraApi.ISSUE, json=payload)
        key = self._expect(data, "key", str)
        return TicketRef(
            key=key,
            id=str(data.get("id", "")),
            summary=draft.summary,
            description=draft.description,
            labels=tuple(draft.labels),
        )

    async def update(self, ticket_key: str, fields: Mapping[str, Any]) -> None:
        path = JiraApi.ISSUE_KEY.format(key=ticket_key)
        await self._request("Issue.Update", "PUT", path, json={"fields": dict(fields)})

    async def do_transition(self, ticket_key: str, transition_id: str) -> None:
        path = JiraApi.TRANSITIONS.format(key=ticket_key)
        await self._request("Issue.DoTransition", "POST", path, json={"transition": {"id": transition_id}})

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, api: str, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        log.debug("jira request api=%s method=%s url=%s", api, method, url)
        try:
            resp = await self._client.request(method, url, headers=self._headers, auth=self._auth, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise self._status_error(api, exc.response) from exc
        except httpx.TimeoutException as exc:
            raise RemoteProtocolError(f"JIRA request {api} timed out: {exc}", timeout=True) from exc
        except httpx.HTTPError as exc:
            raise RemoteProtocolError(f"JIRA request {api} failed: {exc}") from exc

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise RemoteProtocolError(f"JIRA request {api} returned invalid JSON: {exc}") from exc

    @staticmethod
    def _status_error(api: str, resp: httpx.Response) -> ReconcileError:
        message = (
            f"JIRA request {api} {resp.request.method} {resp.request.url} "
            f"returned status {resp.status_code}, body {resp.text!r}"
        )
        if resp.status_code in JiraApi.TRANSIENT_STATUS_CODES:
            return RemoteTransientError(message, status_code=resp.status_code, body=resp.text)
        return RemoteRejectedError(message, status_code=resp.status_code, body=resp.text)

    @staticmethod
    def _expect(data: Any, key: str, kind: type) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get(key), kind):
            raise RemoteProtocolError(f"JIRA response is missing {key!r}: {data!r}")
        return data[key]

    @staticmethod
    def _draft_fields(draft: TicketDraft) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "project": {"key": draft.project},
            "issuetype": {"name": draft.issue_type},
            "summary": draft.summary,
            "description": draft.description,
            "labels": list(draft.labels),
        }
        if draft.priority:
            fields["priority"] = {"name": draft.priority}
        if draft.components:
            fields["components"] = [{"name": name} for name in draft.components]
        fields.update(draft.fields)
        return fields

    @staticmethod
    def _to_ticket(issue: Mapping[str, Any]) -> TicketRef:
        fields = issue.get("fields") or {}
        status = fields.get("status") or {}
        category = status.get("statusCategory") or {}
        resolution = fields.get("resolution") or {}
        return TicketRef(
            key=str(issue.get("key", "")),
            id=str(issue.get("id", "")),
            summary=fields.get("summary") or "",
            description=fields.get("description") or "",
            labels=tuple(fields.get("labels") or ()),
            status_category=category.get("key", ""),
            resolution=resolution.get("name"),
            resolution_date=parse_jira_datetime(fields.get("resolutiondate")),
        )
