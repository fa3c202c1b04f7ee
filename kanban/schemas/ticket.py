from __future__ import annotations

from uuid import UUID

from pydantic import Field, field_validator, model_validator

from kanban.rules.tags import normalize_tags

from .base import EntityModel, Timestamp


class Ticket(EntityModel):
    """A ticket as the command layer sees it.

    ``closed_at`` is written only by commands (close, reopen and the terminal-column
    side effects of move); it is never derived from ``status_column_id``.
    """

    id: UUID
    project_id: UUID
    number: int = Field(ge=1)
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=10000)
    status_column_id: UUID
    assignee_id: UUID | None = None
    reporter_id: UUID
    tags: list[str] = Field(default_factory=list)
    created_at: Timestamp
    updated_at: Timestamp
    closed_at: Timestamp | None = None

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("title must not be blank")
        return stripped

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        return normalize_tags(value)

    @model_validator(mode="after")
    def _check_timestamps(self) -> "Ticket":
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")
        return self

    @property
    def is_closed(self) -> bool:
        return self.closed_at is not None
