"""Create, edit and assign tickets.

All commands here are pure: they never read a clock or touch storage, and they
return a new :class:`Ticket` instead of mutating the one they were given.
"""

from __future__ import annotations

from kanban.core.errors import DomainError, DomainErrorCode
from kanban.rules.columns import get_initial_column
from kanban.rules.tags import normalize_tags
from kanban.schemas.activity_event import AssigneeChanged, NewActivityEvent, TicketCreated, TicketUpdated
from kanban.schemas.commands import AssignTicketInput, CreateTicketInput, UpdateTicketInput
from kanban.schemas.ticket import Ticket
from kanban.schemas.workflow_column import WorkflowColumn

from .result import CommandResult


def create_ticket(payload: CreateTicketInput, columns: list[WorkflowColumn]) -> CommandResult[Ticket]:
    title = payload.title.strip()
    if not title:
        raise DomainError(DomainErrorCode.INVALID_INPUT, "Title must not be empty")
    if not columns:
        raise DomainError(DomainErrorCode.INVALID_INPUT, "At least one workflow column is required")

    initial_column = get_initial_column(columns)
    ticket = Ticket(
        id=payload.id,
        project_id=payload.project_id,
        number=payload.number,
        title=title,
        description=payload.description or "",
        status_column_id=initial_column.id,
        assignee_id=payload.assignee_id,
        reporter_id=payload.reporter_id,
        tags=normalize_tags(payload.tags or []),
        created_at=payload.now,
        updated_at=payload.now,
        closed_at=None,
    )
    event = NewActivityEvent(ticket_id=ticket.id, actor_id=payload.reporter_id, payload=TicketCreated())
    return CommandResult(data=ticket, events=[event])


def update_ticket(ticket: Ticket, payload: UpdateTicketInput) -> CommandResult[Ticket]:
    next_title = payload.title.strip()
    if not next_title:
        raise DomainError(DomainErrorCode.INVALID_INPUT, "Title must not be empty")

    next_description = payload.description
    if next_title == ticket.title and next_description == ticket.description:
        raise DomainError(DomainErrorCode.INVALID_INPUT, "Ticket details are unchanged")

    # model_copy would skip the entity bounds; rebuild so an oversized field raises here
    updated = Ticket.model_validate(
        {**ticket.model_dump(), "title": next_title, "description": next_description, "updated_at": payload.now}
    )
    event = NewActivityEvent(
        ticket_id=ticket.id,
        actor_id=payload.actor_id,
        payload=TicketUpdated(
            from_title=ticket.title,
            to_title=next_title,
            description_changed=next_description != ticket.description,
        ),
    )
    return CommandResult(data=updated, events=[event])


def assign_ticket(ticket: Ticket, payload: AssignTicketInput) -> CommandResult[Ticket]:
    # null-to-null counts as "same"
    if payload.assignee_id == ticket.assignee_id:
        raise DomainError(DomainErrorCode.SAME_ASSIGNEE, "Ticket is already assigned to this user")

    updated = ticket.model_copy(update={"assignee_id": payload.assignee_id, "updated_at": payload.now})
    event = NewActivityEvent(
        ticket_id=ticket.id,
        actor_id=payload.actor_id,
        payload=AssigneeChanged(from_assignee_id=ticket.assignee_id, to_assignee_id=payload.assignee_id),
    )
    return CommandResult(data=updated, events=[event])
