from __future__ import annotations

from uuid import UUID

from pydantic import Field

from .base import EntityModel, Timestamp


class WorkflowColumn(EntityModel):
    id: UUID
    project_id: UUID
    name: str = Field(min_length=1)
    position: int = Field(ge=0)
    created_at: Timestamp
