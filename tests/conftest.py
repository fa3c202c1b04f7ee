"""Shared fixtures: a three-column board, ticket factories and an in-memory database."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from loguru import logger

from kanban.models import ProjectRow, WorkflowColumnRow
from kanban.schemas import Ticket, WorkflowColumn
from kanban.services.db import build_engine, db_session, init_db, make_session_factory
from kanban.services.store import SqlTicketStore

CREATED = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Instant passed to commands; always after the ticket fixtures were created."""
    return CREATED + timedelta(hours=2)


@pytest.fixture
def project_id():
    return uuid4()


@pytest.fixture
def actor_id():
    return uuid4()


@pytest.fixture
def columns(project_id):
    """To Do(0), In Progress(1), Done(2) -- deliberately out of order."""
    return [
        WorkflowColumn(id=uuid4(), project_id=project_id, name="In Progress", position=1, created_at=CREATED),
        WorkflowColumn(id=uuid4(), project_id=project_id, name="Done", position=2, created_at=CREATED),
        WorkflowColumn(id=uuid4(), project_id=project_id, name="To Do", position=0, created_at=CREATED),
    ]


@pytest.fixture
def column_by_name(columns):
    return {column.name: column for column in columns}


@pytest.fixture
def make_ticket(project_id, column_by_name):
    """Factory for tickets sitting in 'To Do' unless overridden."""

    def _make(**overrides):
        fields = {
            "id": uuid4(),
            "project_id": project_id,
            "number": 1,
            "title": "Fix login redirect",
            "description": "Users land on a blank page after login.",
            "status_column_id": column_by_name["To Do"].id,
            "assignee_id": None,
            "reporter_id": uuid4(),
            "tags": [],
            "created_at": CREATED,
            "updated_at": CREATED,
            "closed_at": None,
        }
        fields.update(overrides)
        return Ticket(**fields)

    return _make


@pytest.fixture
def ticket(make_ticket):
    return make_ticket()


@pytest.fixture
def log_records():
    """Capture loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    init_db(engine)
    try:
        yield make_session_factory(engine)
    finally:
        engine.dispose()


@pytest.fixture
def store(session_factory):
    return SqlTicketStore(session_factory)


@pytest.fixture
def seeded_project(session_factory):
    """A committed project with the standard three columns; returns (project_id, columns by name)."""
    project_id = uuid4()
    rows = {}
    with db_session(session_factory) as session:
        session.add(
            ProjectRow(
                id=project_id,
                org_id=uuid4(),
                name="Platform",
                prefix="PLAT",
                created_at=CREATED,
                updated_at=CREATED,
            )
        )
        for position, name in enumerate(["To Do", "In Progress", "Done"]):
            row = WorkflowColumnRow(id=uuid4(), project_id=project_id, name=name, position=position, created_at=CREATED)
            session.add(row)
            rows[name] = row
    return project_id, rows
