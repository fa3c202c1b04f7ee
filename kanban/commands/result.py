from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from kanban.schemas.activity_event import NewActivityEvent

T = TypeVar("T")


class CommandResult(BaseModel, Generic[T]):
    model_config = ConfigDict(frozen=True)

    data: T
    events: list[NewActivityEvent] = Field(default_factory=list)
