from __future__ import annotations

from enum import Enum
from uuid import UUID

from .base import EntityModel, Timestamp


class MembershipRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class Membership(EntityModel):
    id: UUID
    org_id: UUID
    user_id: UUID
    role: MembershipRole
    created_at: Timestamp
