from __future__ import annotations

from uuid import UUID, uuid4

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from kanban.models.activity_event import ActivityEventRow
from kanban.models.project import ProjectRow, WorkflowColumnRow
from kanban.models.tag import TagRow
from kanban.models.ticket import TicketRow
from kanban.rules.tags import normalize_tags
from kanban.schemas.activity_event import ActivityEvent, NewActivityEvent
from kanban.schemas.ticket import Ticket
from kanban.schemas.workflow_column import WorkflowColumn
from kanban.services.allocation import InsertOutcome
from kanban.services.db import db_session
from kanban.utils.time import utc_now


class TicketNotFoundError(LookupError):
    pass


class ProjectNotFoundError(LookupError):
    pass


class SqlTicketStore:
    """SQLAlchemy-backed storage collaborator for :class:`TicketService`.

    Every method runs in its own short transaction taken from ``sessions``. In
    particular the ticket counter is committed before the ticket row is written, so
    the project row is never locked for longer than one increment and a number whose
    create later fails stays burned.
    """

    def __init__(self, sessions: sessionmaker[Session]) -> None:
        self.sessions = sessions

    def next_ticket_number(self, project_id: UUID) -> int:
        stmt = (
            update(ProjectRow)
            .where(ProjectRow.id == project_id)
            .values(ticket_counter=ProjectRow.ticket_counter + 1)
            .execution_options(synchronize_session=False)
        )
        with db_session(self.sessions) as session:
            result = session.execute(stmt)
            if result.rowcount == 0:
                raise ProjectNotFoundError(f"Project not found: {project_id}")
            counter = select(ProjectRow.ticket_counter).where(ProjectRow.id == project_id)
            return session.scalars(counter).one()

    def insert_ticket(self, ticket: Ticket) -> InsertOutcome:
        try:
            with db_session(self.sessions) as session:
                session.add(TicketRow(**ticket.model_dump()))
        except IntegrityError:
            if self._number_taken(ticket.project_id, ticket.number):
                logger.debug(
                    "Insert of ticket number {number} collided in project {project_id}",
                    number=ticket.number,
                    project_id=ticket.project_id,
                )
                return InsertOutcome.DUPLICATE_NUMBER
            raise
        return InsertOutcome.INSERTED

    def get_ticket(self, ticket_id: UUID) -> Ticket:
        with db_session(self.sessions) as session:
            row = session.get(TicketRow, ticket_id)
            if row is None:
                raise TicketNotFoundError(f"Ticket not found: {ticket_id}")
            return self._to_ticket(row)

    def save_ticket(self, ticket: Ticket) -> None:
        with db_session(self.sessions) as session:
            row = session.get(TicketRow, ticket.id)
            if row is None:
                raise TicketNotFoundError(f"Ticket not found: {ticket.id}")
            row.title = ticket.title
            row.description = ticket.description
            row.status_column_id = ticket.status_column_id
            row.assignee_id = ticket.assignee_id
            row.tags = list(ticket.tags)
            row.updated_at = ticket.updated_at
            row.closed_at = ticket.closed_at

    def list_tickets(self, project_id: UUID) -> list[Ticket]:
        stmt = select(TicketRow).where(TicketRow.project_id == project_id)
        with db_session(self.sessions) as session:
            return [self._to_ticket(row) for row in session.scalars(stmt)]

    def list_columns(self, project_id: UUID) -> list[WorkflowColumn]:
        stmt = (
            select(WorkflowColumnRow)
            .where(WorkflowColumnRow.project_id == project_id)
            .order_by(WorkflowColumnRow.position)
        )
        with db_session(self.sessions) as session:
            return [
                WorkflowColumn(
                    id=row.id,
                    project_id=row.project_id,
                    name=row.name,
                    position=row.position,
                    created_at=row.created_at,
                )
                for row in session.scalars(stmt)
            ]

    def ensure_tags(self, project_id: UUID, names: list[str]) -> list[str]:
        """Add any missing names to the project's tag catalog; returns the names added."""
        wanted = normalize_tags(names)
        if not wanted:
            return []
        stmt = select(TagRow.name).where(TagRow.project_id == project_id, TagRow.name.in_(wanted))
        with db_session(self.sessions) as session:
            existing = set(session.scalars(stmt))
            added = [name for name in wanted if name not in existing]
            for name in added:
                session.add(TagRow(project_id=project_id, name=name, created_at=utc_now()))
        for name in added:
            logger.info("Added tag {name} to catalog of project {project_id}", name=name, project_id=project_id)
        return added

    def list_tag_names(self, project_id: UUID) -> list[str]:
        stmt = select(TagRow.name).where(TagRow.project_id == project_id).order_by(TagRow.name)
        with db_session(self.sessions) as session:
            return list(session.scalars(stmt))

    def append_event(self, event: NewActivityEvent) -> ActivityEvent:
        row = ActivityEventRow(**event.to_record(), id=uuid4(), created_at=utc_now())
        with db_session(self.sessions) as session:
            session.add(row)
        return ActivityEvent(
            id=row.id,
            ticket_id=row.ticket_id,
            actor_id=row.actor_id,
            created_at=row.created_at,
            payload=event.payload,
        )

    def list_events(self, ticket_id: UUID) -> list[ActivityEvent]:
        stmt = (
            select(ActivityEventRow)
            .where(ActivityEventRow.ticket_id == ticket_id)
            .order_by(ActivityEventRow.created_at, ActivityEventRow.seq)
        )
        with db_session(self.sessions) as session:
            return [
                ActivityEvent.model_validate(
                    {
                        "id": row.id,
                        "ticket_id": row.ticket_id,
                        "actor_id": row.actor_id,
                        "created_at": row.created_at,
                        "event_type": row.event_type,
                        "payload": row.payload,
                    }
                )
                for row in session.scalars(stmt)
            ]

    def _number_taken(self, project_id: UUID, number: int) -> bool:
        stmt = select(TicketRow.id).where(TicketRow.project_id == project_id, TicketRow.number == number)
        with db_session(self.sessions) as session:
            return session.scalars(stmt).first() is not None

    @staticmethod
    def _to_ticket(row: TicketRow) -> Ticket:
        return Ticket(
            id=row.id,
            project_id=row.project_id,
            number=row.number,
            title=row.title,
            description=row.description,
            status_column_id=row.status_column_id,
            assignee_id=row.assignee_id,
            reporter_id=row.reporter_id,
            tags=list(row.tags or []),
            created_at=row.created_at,
            updated_at=row.updated_at,
            closed_at=row.closed_at,
        )
