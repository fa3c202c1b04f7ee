from __future__ import annotations

from uuid import UUID

from pydantic import Field, field_validator

from kanban.rules.tags import normalize_tag

from .base import EntityModel, Timestamp


class Tag(EntityModel):
    """Project tag catalog entry; independent of which tickets carry the name."""

    id: UUID
    project_id: UUID
    name: str = Field(min_length=1, max_length=50)
    created_at: Timestamp

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        normalized = normalize_tag(value)
        if not normalized:
            raise ValueError("Tag name must not be blank")
        return normalized
