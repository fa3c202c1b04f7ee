from __future__ import annotations

from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .base import Timestamp

# Same bounds as the Ticket and Tag entities, so a command can never produce a ticket
# the store cannot load back.
TicketTitle = Annotated[str, Field(max_length=200)]
TicketDescription = Annotated[str, Field(max_length=10000)]
TagName = Annotated[str, Field(max_length=50)]


class _CommandInput(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TicketDraft(_CommandInput):
    """Everything needed to create a ticket except the minted ``id`` and ``number``."""

    project_id: UUID
    title: TicketTitle
    description: TicketDescription | None = None
    assignee_id: UUID | None = None
    reporter_id: UUID
    tags: list[TagName] | None = None
    now: Timestamp


class CreateTicketInput(TicketDraft):
    id: UUID
    number: int = Field(ge=1)


class ActorInput(_CommandInput):
    actor_id: UUID
    now: Timestamp


class UpdateTicketInput(ActorInput):
    title: TicketTitle
    description: TicketDescription


class MoveTicketInput(ActorInput):
    to_column_id: UUID


class AssignTicketInput(ActorInput):
    assignee_id: UUID | None


class CloseTicketInput(ActorInput):
    pass


class ReopenTicketInput(ActorInput):
    to_column_id: UUID


class AddTagInput(ActorInput):
    tag: TagName


class RemoveTagInput(ActorInput):
    tag: TagName
