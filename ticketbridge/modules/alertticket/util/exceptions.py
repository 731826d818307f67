"""Error taxonomy for reconciliation.

Every failure the engine reports is a :class:`ReconcileError` carrying an
:class:`ErrorKind`. Whether the caller should retry is derived from the kind by
:func:`is_retryable`, the only place that policy lives.
"""

from __future__ import annotations

from ticketbridge.modules.alertticket.util.enums import ErrorKind


class ReconcileError(Exception):
    kind: ErrorKind = ErrorKind.REJECTED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def retryable(self) -> bool:
        return is_retryable(self)


class TemplateError(ReconcileError):
    """A template failed to compile or render."""

    kind = ErrorKind.TEMPLATE

    def __init__(self, message: str, template: str = "") -> None:
        super().__init__(message)
        self.template = template


class RemoteTransientError(ReconcileError):
    """The ticket system answered 500 or 503."""

    kind = ErrorKind.TRANSIENT

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RemoteRejectedError(ReconcileError):
    """The ticket system refused the request (any other non-2xx status)."""

    kind = ErrorKind.REJECTED

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RemoteProtocolError(ReconcileError):
    """Transport failure or unparseable response."""

    kind = ErrorKind.PROTOCOL

    def __init__(self, message: str, timeout: bool = False) -> None:
        super().__init__(message)
        self.timeout = timeout


class StateConflictError(ReconcileError):
    """The requested workflow transition is not available on the ticket."""

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str, transition: str = "", ticket_key: str = "") -> None:
        super().__init__(message)
        self.transition = transition
        self.ticket_key = ticket_key


class UnknownReceiverError(Exception):
    """No receiver policy is configured for the notification's receiver."""

    def __init__(self, receiver: str) -> None:
        super().__init__(f"receiver missing: {receiver}")
        self.receiver = receiver


class ConfigError(Exception):
    """Receiver configuration could not be loaded or is invalid."""


def is_retryable(error: BaseException | None) -> bool:
    if not isinstance(error, ReconcileError):
        return False
    if error.kind is ErrorKind.TRANSIENT:
        return True
    if error.kind is ErrorKind.PROTOCOL:
        return bool(getattr(error, "timeout", False))
    return False
