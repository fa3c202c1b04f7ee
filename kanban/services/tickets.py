from __future__ import annotations

from typing import Protocol
from uuid import UUID

from loguru import logger

from kanban.commands import (
    CommandResult,
    add_tag,
    assign_ticket,
    close_ticket,
    move_ticket,
    remove_tag,
    reopen_ticket,
    update_ticket,
)
from kanban.rules.filters import TicketFilters, filter_tickets, merge_filters
from kanban.rules.sorting import sort_tickets
from kanban.schemas.activity_event import NewActivityEvent
from kanban.schemas.commands import (
    AddTagInput,
    AssignTicketInput,
    CloseTicketInput,
    MoveTicketInput,
    RemoveTagInput,
    ReopenTicketInput,
    TicketDraft,
    UpdateTicketInput,
)
from kanban.schemas.ticket import Ticket
from kanban.schemas.workflow_column import WorkflowColumn
from kanban.services.activity import persist_activity_events
from kanban.services.allocation import InsertOutcome, create_ticket_with_number


class TicketStore(Protocol):
    def next_ticket_number(self, project_id: UUID) -> int: ...

    def insert_ticket(self, ticket: Ticket) -> InsertOutcome: ...

    def get_ticket(self, ticket_id: UUID) -> Ticket: ...

    def save_ticket(self, ticket: Ticket) -> None: ...

    def list_tickets(self, project_id: UUID) -> list[Ticket]: ...

    def list_columns(self, project_id: UUID) -> list[WorkflowColumn]: ...

    def ensure_tags(self, project_id: UUID, names: list[str]) -> object: ...

    def append_event(self, event: NewActivityEvent) -> object: ...


class TicketService:
    """Runs ticket commands against a store: load, decide, save, then log events.

    Domain errors from the commands propagate unchanged; nothing is saved when
    a command rejects its input.
    """

    def __init__(self, store: TicketStore, *, max_attempts: int | None = None) -> None:
        self.store = store
        self.max_attempts = max_attempts

    def create_ticket(self, draft: TicketDraft) -> Ticket:
        columns = self.store.list_columns(draft.project_id)
        result = create_ticket_with_number(
            allocator=self.store,
            inserter=self.store,
            draft=draft,
            columns=columns,
            max_attempts=self.max_attempts,
        )
        ticket = result.data
        logger.info(
            "Created ticket #{number} ({ticket_id}) in project {project_id}",
            number=ticket.number,
            ticket_id=ticket.id,
            project_id=ticket.project_id,
        )
        self._ensure_tags(ticket.project_id, ticket.tags)
        persist_activity_events(self.store, result.events)
        return ticket

    def update_ticket(self, ticket_id: UUID, payload: UpdateTicketInput) -> Ticket:
        ticket = self.store.get_ticket(ticket_id)
        return self._commit(update_ticket(ticket, payload), action="updated")

    def move_ticket(self, ticket_id: UUID, payload: MoveTicketInput) -> Ticket:
        ticket = self.store.get_ticket(ticket_id)
        columns = self.store.list_columns(ticket.project_id)
        return self._commit(move_ticket(ticket, payload, columns), action="moved")

    def assign_ticket(self, ticket_id: UUID, payload: AssignTicketInput) -> Ticket:
        ticket = self.store.get_ticket(ticket_id)
        return self._commit(assign_ticket(ticket, payload), action="assigned")

    def close_ticket(self, ticket_id: UUID, payload: CloseTicketInput) -> Ticket:
        ticket = self.store.get_ticket(ticket_id)
        return self._commit(close_ticket(ticket, payload), action="closed")

    def reopen_ticket(self, ticket_id: UUID, payload: ReopenTicketInput) -> Ticket:
        ticket = self.store.get_ticket(ticket_id)
        columns = self.store.list_columns(ticket.project_id)
        return self._commit(reopen_ticket(ticket, payload, columns), action="reopened")

    def add_tag(self, ticket_id: UUID, payload: AddTagInput) -> Ticket:
        ticket = self.store.get_ticket(ticket_id)
        updated = self._commit(add_tag(ticket, payload), action="tagged")
        self._ensure_tags(updated.project_id, updated.tags)
        return updated

    def remove_tag(self, ticket_id: UUID, payload: RemoveTagInput) -> Ticket:
        # The project tag catalog is left alone.
        ticket = self.store.get_ticket(ticket_id)
        return self._commit(remove_tag(ticket, payload), action="untagged")

    def list_tickets(self, project_id: UUID, *filters: TicketFilters) -> list[Ticket]:
        tickets = self.store.list_tickets(project_id)
        if filters:
            tickets = filter_tickets(tickets, merge_filters(*filters))
        return sort_tickets(tickets)

    def _commit(self, result: CommandResult[Ticket], *, action: str) -> Ticket:
        ticket = result.data
        self.store.save_ticket(ticket)
        logger.info("Ticket #{number} ({ticket_id}) {action}", number=ticket.number, ticket_id=ticket.id, action=action)
        persist_activity_events(self.store, result.events)
        return ticket

    def _ensure_tags(self, project_id: UUID, tags: list[str]) -> None:
        if not tags:
            return
        try:
            self.store.ensure_tags(project_id, tags)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Failed to record tags {tags} for project {project_id}: {error}",
                tags=tags,
                project_id=project_id,
                error=exc,
            )
