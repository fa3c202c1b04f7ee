from __future__ import annotations

from uuid import UUID

from pydantic import Field

from .base import EntityModel, Timestamp


class Project(EntityModel):
    id: UUID
    org_id: UUID
    name: str = Field(min_length=1)
    prefix: str = Field(min_length=1, max_length=10, pattern=r"^[A-Z][A-Z0-9]*$")
    created_at: Timestamp
    updated_at: Timestamp
