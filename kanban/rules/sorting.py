from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kanban.schemas.ticket import Ticket


def sort_tickets(tickets: list[Ticket]) -> list[Ticket]:
    """Most recently updated first; ties fall back to ascending number, then id."""
    ordered = sorted(tickets, key=lambda ticket: (ticket.number, str(ticket.id)))
    # sorted() is stable, so the tie order above survives the reverse pass
    return sorted(ordered, key=lambda ticket: ticket.updated_at, reverse=True)
