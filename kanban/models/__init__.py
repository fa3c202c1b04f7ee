from .activity_event import ActivityEventRow, AppendOnlyViolation
from .base import Base
from .project import ProjectRow, WorkflowColumnRow
from .tag import TagRow
from .ticket import TicketRow

__all__ = [
    "ActivityEventRow",
    "AppendOnlyViolation",
    "Base",
    "ProjectRow",
    "WorkflowColumnRow",
    "TagRow",
    "TicketRow",
]
