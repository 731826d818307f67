"""Alertmanager-facing HTTP endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from ticketbridge.api.schemas import AlertmanagerPayload
from ticketbridge.modules.alertticket import AlertTicketService
from ticketbridge.modules.alertticket.util import UnknownReceiverError

log = logging.getLogger(__name__)

router = APIRouter(tags=["alert"])

UNKNOWN_RECEIVER = "<unknown>"


def get_alert_ticket_service(request: Request) -> AlertTicketService:
    container = getattr(request.app.state, "container", None)
    if not container:
        raise RuntimeError("Service container not initialized.")
    return container.alert_ticket_service


@router.post("/alert")
async def push_alert(
    payload: AlertmanagerPayload,
    svc: AlertTicketService = Depends(get_alert_ticket_service),
) -> Dict[str, Any]:
    group = payload.to_domain()
    receiver = group.receiver or UNKNOWN_RECEIVER
    try:
        outcome = await svc.notify(group)
    except UnknownReceiverError as exc:
        svc.record_request(receiver, 404)
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    if outcome.error is not None:
        status_code = 503 if outcome.retryable else 400
        svc.record_request(receiver, status_code)
        raise HTTPException(
            status_code=status_code,
            detail={
                "error": outcome.error.kind.value,
                "retryable": outcome.retryable,
                "message": str(outcome.error),
            },
        )

    svc.record_request(receiver, 200)
    return {
        "status": "success",
        "message": "OK",
        "issue_key": outcome.ticket_key,
        "action": outcome.action.value,
    }


@router.post("/logger", status_code=204)
async def log_alerts(request: Request) -> Response:
    """Log every alert of a webhook payload without touching any ticket."""
    try:
        payload = AlertmanagerPayload.model_validate(await request.json())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    group_fields = {**payload.common_annotations, **payload.common_labels, **payload.group_labels}
    for alert in payload.alerts:
        fields = {**group_fields, **alert.labels, **alert.annotations}
        log.info(
            "alert %s status=%s startsAt=%s endsAt=%s generatorURL=%s externalURL=%s receiver=%s fingerprint=%s",
            " ".join(f"{name}={value!r}" for name, value in fields.items()),
            alert.status,
            alert.starts_at.isoformat() if alert.starts_at else "",
            alert.ends_at.isoformat() if alert.ends_at else "",
            alert.generator_url,
            payload.external_url,
            payload.receiver,
            alert.fingerprint,
        )
    return Response(status_code=204)
