from .activity_event import (
    ActivityEvent,
    AssigneeChanged,
    EventPayload,
    NewActivityEvent,
    StatusChanged,
    TagAdded,
    TagRemoved,
    TicketClosed,
    TicketCreated,
    TicketReopened,
    TicketUpdated,
)
from .commands import (
    ActorInput,
    AddTagInput,
    AssignTicketInput,
    CloseTicketInput,
    CreateTicketInput,
    MoveTicketInput,
    RemoveTagInput,
    ReopenTicketInput,
    TicketDraft,
    UpdateTicketInput,
)
from .membership import Membership, MembershipRole
from .organization import Organization
from .project import Project
from .tag import Tag
from .ticket import Ticket
from .user import User
from .workflow_column import WorkflowColumn

__all__ = [
    "ActivityEvent",
    "AssigneeChanged",
    "EventPayload",
    "NewActivityEvent",
    "StatusChanged",
    "TagAdded",
    "TagRemoved",
    "TicketClosed",
    "TicketCreated",
    "TicketReopened",
    "TicketUpdated",
    "ActorInput",
    "AddTagInput",
    "AssignTicketInput",
    "CloseTicketInput",
    "CreateTicketInput",
    "MoveTicketInput",
    "RemoveTagInput",
    "ReopenTicketInput",
    "TicketDraft",
    "UpdateTicketInput",
    "Membership",
    "MembershipRole",
    "Organization",
    "Project",
    "Tag",
    "Ticket",
    "User",
    "WorkflowColumn",
]
