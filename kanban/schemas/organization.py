from __future__ import annotations

from uuid import UUID

from pydantic import Field

from .base import EntityModel, Timestamp


class Organization(EntityModel):
    id: UUID
    name: str = Field(min_length=1)
    created_at: Timestamp
    updated_at: Timestamp
