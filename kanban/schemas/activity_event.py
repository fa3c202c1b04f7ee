"""Activity log events.

Each payload class is one member of a union discriminated on ``event_type``.
Commands emit :class:`NewActivityEvent`; the storage backend assigns ``id`` and
``created_at`` when it writes them, producing :class:`ActivityEvent`.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .base import EntityModel, Timestamp


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TicketCreated(_Payload):
    event_type: Literal["ticket_created"] = "ticket_created"


class StatusChanged(_Payload):
    event_type: Literal["status_changed"] = "status_changed"
    from_column_id: UUID
    to_column_id: UUID


class AssigneeChanged(_Payload):
    event_type: Literal["assignee_changed"] = "assignee_changed"
    from_assignee_id: UUID | None
    to_assignee_id: UUID | None


class TicketUpdated(_Payload):
    event_type: Literal["ticket_updated"] = "ticket_updated"
    from_title: str
    to_title: str
    description_changed: bool


class TagAdded(_Payload):
    event_type: Literal["tag_added"] = "tag_added"
    tag: str


class TagRemoved(_Payload):
    event_type: Literal["tag_removed"] = "tag_removed"
    tag: str


class TicketClosed(_Payload):
    event_type: Literal["ticket_closed"] = "ticket_closed"


class TicketReopened(_Payload):
    event_type: Literal["ticket_reopened"] = "ticket_reopened"
    to_column_id: UUID


EventPayload = Annotated[
    Union[
        TicketCreated,
        StatusChanged,
        AssigneeChanged,
        TicketUpdated,
        TagAdded,
        TagRemoved,
        TicketClosed,
        TicketReopened,
    ],
    Field(discriminator="event_type"),
]


class NewActivityEvent(EntityModel):
    ticket_id: UUID
    actor_id: UUID
    payload: EventPayload

    @model_validator(mode="before")
    @classmethod
    def _lift_event_type(cls, data: Any) -> Any:
        # Accept the flat record shape {"event_type": ..., "payload": {...}}.
        if isinstance(data, dict) and "event_type" in data:
            data = dict(data)
            event_type = data.pop("event_type")
            payload = data.get("payload")
            if payload is None:
                payload = {}
            if isinstance(payload, dict):
                data["payload"] = {**payload, "event_type": event_type}
        return data

    @property
    def event_type(self) -> str:
        return self.payload.event_type

    def to_record(self) -> dict[str, Any]:
        return {
            "ticket_id": self.ticket_id,
            "actor_id": self.actor_id,
            "event_type": self.event_type,
            "payload": self.payload.model_dump(mode="json", exclude={"event_type"}),
        }


class ActivityEvent(NewActivityEvent):
    id: UUID
    created_at: Timestamp
