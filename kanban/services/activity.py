from __future__ import annotations

from typing import Protocol, assert_never

from loguru import logger

from kanban.schemas.activity_event import (
    AssigneeChanged,
    NewActivityEvent,
    StatusChanged,
    TagAdded,
    TagRemoved,
    TicketClosed,
    TicketCreated,
    TicketReopened,
    TicketUpdated,
)


class EventAppender(Protocol):
    def append_event(self, event: NewActivityEvent) -> None: ...


def describe_event(event: NewActivityEvent) -> str:
    payload = event.payload
    match payload:
        case TicketCreated():
            return "created the ticket"
        case StatusChanged(from_column_id=from_column, to_column_id=to_column):
            return f"moved the ticket from {from_column} to {to_column}"
        case AssigneeChanged(to_assignee_id=None):
            return "unassigned the ticket"
        case AssigneeChanged(to_assignee_id=assignee):
            return f"assigned the ticket to {assignee}"
        case TicketUpdated(from_title=from_title, to_title=to_title):
            if from_title == to_title:
                return "updated the description"
            return f"renamed the ticket from '{from_title}' to '{to_title}'"
        case TagAdded(tag=tag):
            return f"added tag '{tag}'"
        case TagRemoved(tag=tag):
            return f"removed tag '{tag}'"
        case TicketClosed():
            return "closed the ticket"
        case TicketReopened(to_column_id=to_column):
            return f"reopened the ticket into {to_column}"
        case _:
            assert_never(payload)


def persist_activity_events(appender: EventAppender, events: list[NewActivityEvent]) -> int:
    """Append events one by one, best-effort.

    The ticket mutation that produced the events has already been saved, so a
    failed append is logged and skipped rather than raised. Returns how many
    events were written.
    """
    written = 0
    for event in events:
        try:
            appender.append_event(event)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Failed to persist {event_type} event for ticket {ticket_id}: {error}",
                event_type=event.event_type,
                ticket_id=event.ticket_id,
                error=exc,
            )
            continue
        written += 1
        logger.debug(
            "Ticket {ticket_id}: actor {actor_id} {summary}",
            ticket_id=event.ticket_id,
            actor_id=event.actor_id,
            summary=describe_event(event),
        )
    return written
