from __future__ import annotations

from kanban.core.errors import DomainError, DomainErrorCode
from kanban.rules.tags import add_tag_to_list, has_tag, normalize_tag, remove_tag_from_list
from kanban.schemas.activity_event import NewActivityEvent, TagAdded, TagRemoved
from kanban.schemas.commands import AddTagInput, RemoveTagInput
from kanban.schemas.ticket import Ticket

from .result import CommandResult


def add_tag(ticket: Ticket, payload: AddTagInput) -> CommandResult[Ticket]:
    normalized = normalize_tag(payload.tag)
    if not normalized:
        raise DomainError(DomainErrorCode.INVALID_INPUT, "Tag must not be empty")
    if has_tag(ticket.tags, normalized):
        raise DomainError(DomainErrorCode.TAG_ALREADY_EXISTS, "Tag already exists on this ticket")

    updated = ticket.model_copy(
        update={"tags": add_tag_to_list(ticket.tags, normalized), "updated_at": payload.now}
    )
    event = NewActivityEvent(ticket_id=ticket.id, actor_id=payload.actor_id, payload=TagAdded(tag=normalized))
    return CommandResult(data=updated, events=[event])


def remove_tag(ticket: Ticket, payload: RemoveTagInput) -> CommandResult[Ticket]:
    normalized = normalize_tag(payload.tag)
    if not has_tag(ticket.tags, normalized):
        raise DomainError(DomainErrorCode.TAG_NOT_FOUND, "Tag not found on this ticket")

    updated = ticket.model_copy(
        update={"tags": remove_tag_from_list(ticket.tags, normalized), "updated_at": payload.now}
    )
    event = NewActivityEvent(ticket_id=ticket.id, actor_id=payload.actor_id, payload=TagRemoved(tag=normalized))
    return CommandResult(data=updated, events=[event])
