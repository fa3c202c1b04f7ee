"""Per-project ticket number allocation.

Numbers come from an atomic counter in storage, but allocation and insertion
are two separate steps, so two concurrent creators can still collide. The
uniqueness constraint on ``(project_id, number)`` detects the losing side and
:func:`create_ticket_with_number` simply asks for another number. A number
drawn by an attempt that never lands is skipped for good; gaps in the
sequence are expected.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Protocol
from uuid import UUID, uuid4

from loguru import logger

from kanban.commands import CommandResult, create_ticket
from kanban.core.config import get_settings
from kanban.schemas.commands import CreateTicketInput, TicketDraft
from kanban.schemas.ticket import Ticket
from kanban.schemas.workflow_column import WorkflowColumn


class InsertOutcome(str, Enum):
    INSERTED = "inserted"
    DUPLICATE_NUMBER = "duplicate_number"


class TicketNumberAllocator(Protocol):
    def next_ticket_number(self, project_id: UUID) -> int: ...


class TicketInserter(Protocol):
    def insert_ticket(self, ticket: Ticket) -> InsertOutcome:
        """Insert ``ticket``.

        Returns ``DUPLICATE_NUMBER`` only for a ``(project_id, number)``
        collision; every other failure must raise.
        """
        ...


class TicketNumberAllocationError(RuntimeError):
    def __init__(self, project_id: UUID, attempts: int) -> None:
        super().__init__(f"failed to allocate a unique ticket number after {attempts} attempts")
        self.project_id = project_id
        self.attempts = attempts


def create_ticket_with_number(
    *,
    allocator: TicketNumberAllocator,
    inserter: TicketInserter,
    draft: TicketDraft,
    columns: list[WorkflowColumn],
    max_attempts: int | None = None,
    id_factory: Callable[[], UUID] = uuid4,
) -> CommandResult[Ticket]:
    attempts = max_attempts if max_attempts is not None else get_settings().ticket_number_max_attempts
    if attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {attempts}")

    for attempt in range(1, attempts + 1):
        number = allocator.next_ticket_number(draft.project_id)
        logger.debug(
            "Allocated ticket number {number} for project {project_id} (attempt {attempt}/{attempts})",
            number=number,
            project_id=draft.project_id,
            attempt=attempt,
            attempts=attempts,
        )
        payload = CreateTicketInput(**draft.model_dump(), id=id_factory(), number=number)
        result = create_ticket(payload, columns)

        outcome = inserter.insert_ticket(result.data)
        if outcome is InsertOutcome.INSERTED:
            return result

        logger.warning(
            "Ticket number {number} already taken in project {project_id}; retrying",
            number=number,
            project_id=draft.project_id,
        )

    logger.error(
        "Giving up on ticket number allocation for project {project_id} after {attempts} attempts",
        project_id=draft.project_id,
        attempts=attempts,
    )
    raise TicketNumberAllocationError(draft.project_id, attempts)
