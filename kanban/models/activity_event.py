from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Uuid, event
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class AppendOnlyViolation(RuntimeError):
    pass


class ActivityEventRow(Base):
    __tablename__ = "activity_events"

    # database-assigned insertion order; breaks ties between events sharing a timestamp
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, unique=True, nullable=False, default=uuid.uuid4)
    ticket_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("tickets.id"), nullable=False, index=True)
    actor_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    event_type: Mapped[str] = mapped_column(String(32), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


@event.listens_for(ActivityEventRow, "before_update")
def _reject_update(mapper, connection, target: ActivityEventRow) -> None:
    raise AppendOnlyViolation(f"activity event {target.id} cannot be updated")


@event.listens_for(ActivityEventRow, "before_delete")
def _reject_delete(mapper, connection, target: ActivityEventRow) -> None:
    raise AppendOnlyViolation(f"activity event {target.id} cannot be deleted")
