"""Ticket labels identifying an alert group.

Two encodings exist. The legacy one is the group labels rendered like a
Prometheus ``ALERT`` selector, which is readable but grows with the label set
and can exceed Jira's 255 character label limit. The hashed one is a SHA-512
over the same pairs and always has the same length. The two encodings are not
comparable with each other.
"""

from __future__ import annotations

import hashlib
import re
from typing import Mapping

from ticketbridge.modules.alertticket.domain.label_set import LabelSet
from ticketbridge.modules.alertticket.util.constants import AlertTicketConstant

_WHITESPACE = re.compile(r"\s+")

_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def _escape(char: str) -> str:
    if char in _ESCAPES:
        return _ESCAPES[char]
    if char.isprintable():
        return char
    code = ord(char)
    if code < 0x20 or code == 0x7F:
        return f"\\x{code:02x}"
    if code < 0x10000:
        return f"\\u{code:04x}"
    return f"\\U{code:08x}"


def quote(value: str) -> str:
    """Double-quote ``value`` with backslash escapes.

    Printable characters are kept as is, control characters become ``\\xHH``
    and other non-printable ones ``\\uHHHH`` or ``\\UHHHHHHHH``. Existing
    ticket labels use exactly this escaping, so it must not change.
    """
    return '"' + "".join(_escape(char) for char in value) + '"'


def fingerprint(group_labels: Mapping[str, str], hashed: bool) -> str:
    labels = LabelSet.of(group_labels)
    if hashed:
        digest = hashlib.sha512()
        for pair in labels.sorted_pairs():
            digest.update(f"{pair.name}:{quote(pair.value)},".encode("utf-8"))
        return f"{AlertTicketConstant.HASHED_LABEL_PREFIX}{{{digest.hexdigest()}}}"

    body = ",".join(f"{pair.name}={quote(pair.value)}" for pair in labels.sorted_pairs())
    label = f"{AlertTicketConstant.LEGACY_LABEL_PREFIX}{{{body}}}"
    return _WHITESPACE.sub("", label)
