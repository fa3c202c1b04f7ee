from __future__ import annotations

from uuid import UUID

from pydantic import Field, field_validator

from .base import EntityModel, Timestamp


class User(EntityModel):
    id: UUID
    email: str
    display_name: str = Field(min_length=1)
    created_at: Timestamp

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        local, sep, domain = value.strip().partition("@")
        if not sep or not local or not domain or "@" in domain:
            raise ValueError(f"'{value}' is not a valid email address")
        return value.strip()
