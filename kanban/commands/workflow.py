"""Column moves and the closed/open lifecycle.

Closing is independent of column placement: ``close_ticket`` leaves the ticket
where it is. Only ``move_ticket`` ties the two together, and only for the
terminal column (see :func:`kanban.rules.columns.is_terminal_column`):

* entering the terminal column closes an open ticket;
* leaving the terminal column reopens a ticket that is closed.
"""

from __future__ import annotations

from datetime import datetime

from kanban.core.errors import DomainError, DomainErrorCode
from kanban.rules.columns import find_column, is_terminal_column
from kanban.schemas.activity_event import NewActivityEvent, StatusChanged, TicketClosed, TicketReopened
from kanban.schemas.commands import CloseTicketInput, MoveTicketInput, ReopenTicketInput
from kanban.schemas.ticket import Ticket
from kanban.schemas.workflow_column import WorkflowColumn

from .result import CommandResult


def move_ticket(ticket: Ticket, payload: MoveTicketInput, columns: list[WorkflowColumn]) -> CommandResult[Ticket]:
    if payload.to_column_id == ticket.status_column_id:
        raise DomainError(DomainErrorCode.SAME_COLUMN, "Ticket is already in this column")

    target = find_column(columns, payload.to_column_id)
    if target is None:
        raise DomainError(DomainErrorCode.COLUMN_NOT_FOUND, "Target column not found")
    previous = find_column(columns, ticket.status_column_id)

    events = [
        NewActivityEvent(
            ticket_id=ticket.id,
            actor_id=payload.actor_id,
            payload=StatusChanged(from_column_id=ticket.status_column_id, to_column_id=target.id),
        )
    ]

    closed_at: datetime | None = ticket.closed_at
    if is_terminal_column(target):
        if ticket.closed_at is None:
            closed_at = payload.now
            events.append(NewActivityEvent(ticket_id=ticket.id, actor_id=payload.actor_id, payload=TicketClosed()))
    elif is_terminal_column(previous) and ticket.closed_at is not None:
        closed_at = None
        events.append(
            NewActivityEvent(
                ticket_id=ticket.id,
                actor_id=payload.actor_id,
                payload=TicketReopened(to_column_id=target.id),
            )
        )

    updated = ticket.model_copy(
        update={"status_column_id": target.id, "closed_at": closed_at, "updated_at": payload.now}
    )
    return CommandResult(data=updated, events=events)


def close_ticket(ticket: Ticket, payload: CloseTicketInput) -> CommandResult[Ticket]:
    if ticket.closed_at is not None:
        raise DomainError(DomainErrorCode.TICKET_ALREADY_CLOSED, "Ticket is already closed")

    updated = ticket.model_copy(update={"closed_at": payload.now, "updated_at": payload.now})
    event = NewActivityEvent(ticket_id=ticket.id, actor_id=payload.actor_id, payload=TicketClosed())
    return CommandResult(data=updated, events=[event])


def reopen_ticket(ticket: Ticket, payload: ReopenTicketInput, columns: list[WorkflowColumn]) -> CommandResult[Ticket]:
    if ticket.closed_at is None:
        raise DomainError(DomainErrorCode.TICKET_NOT_CLOSED, "Ticket is not closed")

    target = find_column(columns, payload.to_column_id)
    if target is None:
        raise DomainError(DomainErrorCode.COLUMN_NOT_FOUND, "Target column not found")

    updated = ticket.model_copy(
        update={"status_column_id": target.id, "closed_at": None, "updated_at": payload.now}
    )
    event = NewActivityEvent(
        ticket_id=ticket.id,
        actor_id=payload.actor_id,
        payload=TicketReopened(to_column_id=target.id),
    )
    return CommandResult(data=updated, events=[event])
