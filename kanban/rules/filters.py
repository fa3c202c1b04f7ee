"""Ticket list filtering.

Only explicitly provided filter fields take part in matching, so
``TicketFilters(assignee_id=None)`` selects unassigned tickets while
``TicketFilters()`` leaves assignment unconstrained.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from kanban.rules.tags import has_tag

if TYPE_CHECKING:
    from kanban.schemas.ticket import Ticket


class TicketFilters(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    status_column_id: UUID | None = None
    assignee_id: UUID | None = None
    tag: str | None = None
    search: str | None = None

    def is_set(self, name: str) -> bool:
        return name in self.model_fields_set


def matches_filters(ticket: Ticket, filters: TicketFilters) -> bool:
    if filters.is_set("status_column_id") and ticket.status_column_id != filters.status_column_id:
        return False

    if filters.is_set("assignee_id") and ticket.assignee_id != filters.assignee_id:
        return False

    if filters.is_set("tag") and filters.tag is not None and not has_tag(ticket.tags, filters.tag):
        return False

    if filters.search:
        term = filters.search.lower()
        in_title = term in ticket.title.lower()
        in_description = term in ticket.description.lower()
        if not in_title and not in_description:
            return False

    return True


def filter_tickets(tickets: list[Ticket], filters: TicketFilters) -> list[Ticket]:
    return [ticket for ticket in tickets if matches_filters(ticket, filters)]


def merge_filters(*filters: TicketFilters) -> TicketFilters:
    merged: dict[str, object] = {}
    for item in filters:
        for name in item.model_fields_set:
            merged[name] = getattr(item, name)
    return TicketFilters(**merged)
