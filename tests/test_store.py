"""Tests for the SQLAlchemy store and the TicketService running on top of it."""

from datetime import timedelta
from uuid import uuid4

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from kanban.core.errors import DomainError, DomainErrorCode
from kanban.models import ActivityEventRow, AppendOnlyViolation, ProjectRow, TicketRow
from kanban.rules import TicketFilters
from kanban.schemas import (
    AddTagInput,
    AssignTicketInput,
    CloseTicketInput,
    MoveTicketInput,
    NewActivityEvent,
    RemoveTagInput,
    ReopenTicketInput,
    TagAdded,
    TicketDraft,
    UpdateTicketInput,
)
from kanban.services import store as store_module
from kanban.services.allocation import InsertOutcome
from kanban.services.db import db_session
from kanban.services.store import ProjectNotFoundError, TicketNotFoundError
from kanban.services.tickets import TicketService


@pytest.fixture
def service(store):
    return TicketService(store)


@pytest.fixture
def draft_for(now):
    def _draft(project_id, **overrides):
        fields = {"project_id": project_id, "title": "Broken search", "reporter_id": uuid4(), "now": now}
        fields.update(overrides)
        return TicketDraft(**fields)

    return _draft


def _counter(session_factory, project_id):
    with db_session(session_factory) as session:
        return session.scalar(select(ProjectRow.ticket_counter).where(ProjectRow.id == project_id))


class TestSqlTicketStore:
    def test_numbers_increase_per_project(self, store, seeded_project):
        project_id, _ = seeded_project
        assert [store.next_ticket_number(project_id) for _ in range(3)] == [1, 2, 3]

    def test_counter_is_committed_before_any_insert(self, store, seeded_project, session_factory):
        project_id, _ = seeded_project
        assert store.next_ticket_number(project_id) == 1
        # visible from an unrelated session straight away
        assert _counter(session_factory, project_id) == 1

    def test_unknown_project(self, store):
        with pytest.raises(ProjectNotFoundError):
            store.next_ticket_number(uuid4())

    def test_duplicate_number_is_reported(self, store, seeded_project, make_ticket, column_by_name):
        project_id, rows = seeded_project
        first = make_ticket(project_id=project_id, number=1, status_column_id=rows["To Do"].id)
        clash = make_ticket(project_id=project_id, number=1, status_column_id=rows["To Do"].id)
        assert store.insert_ticket(first) is InsertOutcome.INSERTED
        assert store.insert_ticket(clash) is InsertOutcome.DUPLICATE_NUMBER
        assert [t.id for t in store.list_tickets(project_id)] == [first.id]

    def test_same_number_in_other_project_is_fine(self, store, seeded_project, session_factory, make_ticket, now):
        project_id, rows = seeded_project
        other = ProjectRow(id=uuid4(), org_id=uuid4(), name="Other", prefix="OTH", created_at=now, updated_at=now)
        with db_session(session_factory) as session:
            session.add(other)
        assert store.insert_ticket(make_ticket(project_id=project_id, number=1)) is InsertOutcome.INSERTED
        assert store.insert_ticket(make_ticket(project_id=other.id, number=1)) is InsertOutcome.INSERTED

    def test_round_trip(self, store, seeded_project, make_ticket, now):
        project_id, rows = seeded_project
        ticket = make_ticket(project_id=project_id, status_column_id=rows["To Do"].id, tags=["bug"], closed_at=now)
        store.insert_ticket(ticket)
        assert store.get_ticket(ticket.id) == ticket

    def test_missing_ticket(self, store, make_ticket):
        with pytest.raises(TicketNotFoundError):
            store.get_ticket(uuid4())
        with pytest.raises(TicketNotFoundError):
            store.save_ticket(make_ticket())

    def test_columns_come_back_sorted(self, store, seeded_project):
        project_id, _ = seeded_project
        assert [c.name for c in store.list_columns(project_id)] == ["To Do", "In Progress", "Done"]

    def test_ensure_tags_is_idempotent(self, store, seeded_project):
        project_id, _ = seeded_project
        store.ensure_tags(project_id, ["Bug", "ui"])
        store.ensure_tags(project_id, ["bug", "perf"])
        assert store.list_tag_names(project_id) == ["bug", "perf", "ui"]

    def test_events_are_append_only(self, store, session_factory, seeded_project, make_ticket, actor_id):
        project_id, rows = seeded_project
        ticket = make_ticket(project_id=project_id, status_column_id=rows["To Do"].id)
        store.insert_ticket(ticket)
        stored = store.append_event(NewActivityEvent(ticket_id=ticket.id, actor_id=actor_id, payload=TagAdded(tag="bug")))
        assert stored.payload == TagAdded(tag="bug")

        with pytest.raises(AppendOnlyViolation), db_session(session_factory) as session:
            row = session.scalars(select(ActivityEventRow).where(ActivityEventRow.id == stored.id)).one()
            row.event_type = "tag_removed"
        assert [e.event_type for e in store.list_events(ticket.id)] == ["tag_added"]

    def test_events_cannot_be_deleted(self, store, session_factory, seeded_project, make_ticket, actor_id):
        project_id, rows = seeded_project
        ticket = make_ticket(project_id=project_id, status_column_id=rows["To Do"].id)
        store.insert_ticket(ticket)
        stored = store.append_event(NewActivityEvent(ticket_id=ticket.id, actor_id=actor_id, payload=TagAdded(tag="x")))
        with pytest.raises(AppendOnlyViolation), db_session(session_factory) as session:
            session.delete(session.scalars(select(ActivityEventRow).where(ActivityEventRow.id == stored.id)).one())
        assert len(store.list_events(ticket.id)) == 1


class TestTicketServiceCreate:
    def test_numbers_are_sequential(self, service, seeded_project, draft_for):
        project_id, rows = seeded_project
        first = service.create_ticket(draft_for(project_id))
        second = service.create_ticket(draft_for(project_id, title="Second"))
        assert (first.number, second.number) == (1, 2)
        assert first.status_column_id == rows["To Do"].id

    def test_skips_numbers_already_taken(self, service, store, seeded_project, draft_for, make_ticket, session_factory):
        project_id, rows = seeded_project
        # a row holding number 1 that the counter does not know about
        store.insert_ticket(make_ticket(project_id=project_id, number=1, status_column_id=rows["To Do"].id))
        created = service.create_ticket(draft_for(project_id))
        assert created.number == 2
        assert _counter(session_factory, project_id) == 2

    def test_records_event_and_tags(self, service, store, seeded_project, draft_for):
        project_id, _ = seeded_project
        created = service.create_ticket(draft_for(project_id, tags=["Backend", "backend", "api"]))
        assert created.tags == ["backend", "api"]
        assert store.list_tag_names(project_id) == ["api", "backend"]
        events = store.list_events(created.id)
        assert [e.event_type for e in events] == ["ticket_created"]
        assert events[0].actor_id == created.reporter_id

    def test_failed_create_burns_its_number(
        self, service, store, seeded_project, draft_for, session_factory, monkeypatch
    ):
        project_id, _ = seeded_project
        real_insert = store.insert_ticket

        def _drop_connection(ticket):
            raise RuntimeError("connection dropped")

        monkeypatch.setattr(store, "insert_ticket", _drop_connection)
        with pytest.raises(RuntimeError):
            service.create_ticket(draft_for(project_id))
        assert _counter(session_factory, project_id) == 1
        assert store.list_tickets(project_id) == []

        monkeypatch.setattr(store, "insert_ticket", real_insert)
        assert service.create_ticket(draft_for(project_id)).number == 2

    def test_number_from_rolled_back_caller_transaction_is_skipped(
        self, store, service, seeded_project, session_factory, draft_for
    ):
        project_id, _ = seeded_project
        with pytest.raises(RuntimeError), db_session(session_factory):
            store.next_ticket_number(project_id)
            raise RuntimeError("request aborted")
        assert service.create_ticket(draft_for(project_id)).number == 2

    def test_oversized_draft_rejected(self, seeded_project, draft_for):
        project_id, _ = seeded_project
        with pytest.raises(ValidationError):
            draft_for(project_id, title="t" * 201)
        with pytest.raises(ValidationError):
            draft_for(project_id, description="d" * 10001)

    def test_project_without_columns(self, service, session_factory, draft_for, now):
        project = ProjectRow(id=uuid4(), org_id=uuid4(), name="Empty", prefix="EMP", created_at=now, updated_at=now)
        with db_session(session_factory) as session:
            session.add(project)
        with pytest.raises(DomainError) as exc_info:
            service.create_ticket(draft_for(project.id))
        assert exc_info.value.code is DomainErrorCode.INVALID_INPUT


class TestTicketServiceLifecycle:
    @pytest.fixture
    def created(self, service, seeded_project, draft_for):
        project_id, _ = seeded_project
        return service.create_ticket(draft_for(project_id, description="Search returns nothing"))

    def test_move_to_done_and_back(self, service, store, seeded_project, created, actor_id, now):
        _, rows = seeded_project
        done = service.move_ticket(created.id, MoveTicketInput(to_column_id=rows["Done"].id, actor_id=actor_id, now=now))
        assert done.closed_at == now
        assert store.get_ticket(created.id).closed_at is not None

        back = service.move_ticket(
            created.id, MoveTicketInput(to_column_id=rows["In Progress"].id, actor_id=actor_id, now=now)
        )
        assert back.closed_at is None
        types = [e.event_type for e in store.list_events(created.id)]
        assert types == ["ticket_created", "status_changed", "ticket_closed", "status_changed", "ticket_reopened"]

    def test_events_sharing_a_timestamp_keep_emission_order(
        self, service, store, seeded_project, created, actor_id, now, monkeypatch
    ):
        _, rows = seeded_project
        monkeypatch.setattr(store_module, "utc_now", lambda: now)
        service.move_ticket(created.id, MoveTicketInput(to_column_id=rows["Done"].id, actor_id=actor_id, now=now))
        service.move_ticket(
            created.id, MoveTicketInput(to_column_id=rows["To Do"].id, actor_id=actor_id, now=now)
        )
        tied = [e for e in store.list_events(created.id) if e.created_at == now]
        assert [e.event_type for e in tied] == ["status_changed", "ticket_closed", "status_changed", "ticket_reopened"]

    def test_close_and_reopen(self, service, seeded_project, created, actor_id, now):
        _, rows = seeded_project
        closed = service.close_ticket(created.id, CloseTicketInput(actor_id=actor_id, now=now))
        assert closed.status_column_id == rows["To Do"].id
        reopened = service.reopen_ticket(
            created.id, ReopenTicketInput(to_column_id=rows["In Progress"].id, actor_id=actor_id, now=now)
        )
        assert reopened.closed_at is None
        assert reopened.status_column_id == rows["In Progress"].id

    def test_rejected_command_saves_nothing(self, service, store, created, actor_id, now):
        with pytest.raises(DomainError) as exc_info:
            service.update_ticket(
                created.id,
                UpdateTicketInput(title=created.title, description=created.description, actor_id=actor_id, now=now),
            )
        assert exc_info.value.code is DomainErrorCode.INVALID_INPUT
        assert store.get_ticket(created.id) == created
        assert [e.event_type for e in store.list_events(created.id)] == ["ticket_created"]

    def test_oversized_update_leaves_ticket_loadable(self, service, store, created, actor_id, now):
        with pytest.raises(ValidationError):
            service.update_ticket(
                created.id, UpdateTicketInput(title="y" * 300, description="", actor_id=actor_id, now=now)
            )
        oversized = UpdateTicketInput.model_construct(title="y" * 300, description="", actor_id=actor_id, now=now)
        with pytest.raises(ValidationError):
            service.update_ticket(created.id, oversized)
        assert store.get_ticket(created.id) == created

    def test_assign_and_update(self, service, store, created, actor_id, now):
        assignee = uuid4()
        service.assign_ticket(created.id, AssignTicketInput(assignee_id=assignee, actor_id=actor_id, now=now))
        service.update_ticket(created.id, UpdateTicketInput(title="Search broken", description="", actor_id=actor_id, now=now))
        stored = store.get_ticket(created.id)
        assert stored.assignee_id == assignee
        assert stored.title == "Search broken"
        assert stored.description == ""

    def test_tag_removal_keeps_catalog(self, service, store, seeded_project, created, actor_id, now):
        project_id, _ = seeded_project
        service.add_tag(created.id, AddTagInput(tag="Search", actor_id=actor_id, now=now))
        untagged = service.remove_tag(created.id, RemoveTagInput(tag="SEARCH", actor_id=actor_id, now=now))
        assert untagged.tags == []
        assert store.list_tag_names(project_id) == ["search"]

    def test_list_tickets_filters_and_sorts(self, service, seeded_project, draft_for, actor_id, now):
        project_id, rows = seeded_project
        older = service.create_ticket(draft_for(project_id, title="Older", tags=["ui"]))
        newer = service.create_ticket(draft_for(project_id, title="Newer", tags=["ui"]))
        service.move_ticket(
            older.id,
            MoveTicketInput(to_column_id=rows["In Progress"].id, actor_id=actor_id, now=now + timedelta(minutes=1)),
        )
        assert [t.title for t in service.list_tickets(project_id)] == ["Older", "Newer"]
        in_progress = TicketFilters(status_column_id=rows["In Progress"].id)
        assert [t.id for t in service.list_tickets(project_id, TicketFilters(tag="UI"), in_progress)] == [older.id]
        assert [t.id for t in service.list_tickets(project_id, TicketFilters(assignee_id=None))] == [older.id, newer.id]


class TestEventPersistenceIsBestEffort:
    def test_failed_event_write_does_not_undo_mutation(
        self, service, store, seeded_project, draft_for, actor_id, now, monkeypatch, log_records
    ):
        project_id, _ = seeded_project
        created = service.create_ticket(draft_for(project_id))

        def _boom(event):
            raise RuntimeError("event store offline")

        monkeypatch.setattr(store, "append_event", _boom)
        closed = service.close_ticket(created.id, CloseTicketInput(actor_id=actor_id, now=now))
        assert closed.closed_at == now
        assert store.get_ticket(created.id).closed_at is not None
        assert any("event store offline" in r["message"] for r in log_records if r["level"].name == "WARNING")

    def test_ticket_row_survives(self, session_factory, seeded_project, service, draft_for):
        project_id, _ = seeded_project
        created = service.create_ticket(draft_for(project_id))
        with db_session(session_factory) as session:
            assert session.get(TicketRow, created.id) is not None
