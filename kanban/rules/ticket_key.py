from __future__ import annotations

import re
from typing import NamedTuple

PREFIX_RE = re.compile(r"[A-Z][A-Z0-9]*")
TICKET_KEY_RE = re.compile(r"(?P<prefix>[A-Z][A-Z0-9]*)-(?P<number>[0-9]+)")


class TicketKey(NamedTuple):
    prefix: str
    number: int


def generate_ticket_key(prefix: str, number: int) -> str:
    if not PREFIX_RE.fullmatch(prefix):
        raise ValueError(f"Invalid project prefix: {prefix!r}")
    if number < 1:
        raise ValueError(f"Ticket number must be positive, got {number}")
    return f"{prefix}-{number}"


def parse_ticket_key(key: str) -> TicketKey | None:
    match = TICKET_KEY_RE.fullmatch(key)
    if not match:
        return None
    return TicketKey(prefix=match.group("prefix"), number=int(match.group("number")))
