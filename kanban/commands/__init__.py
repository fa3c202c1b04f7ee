from .lifecycle import assign_ticket, create_ticket, update_ticket
from .result import CommandResult
from .tagging import add_tag, remove_tag
from .workflow import close_ticket, move_ticket, reopen_ticket

__all__ = [
    "CommandResult",
    "create_ticket",
    "update_ticket",
    "assign_ticket",
    "move_ticket",
    "close_ticket",
    "reopen_ticket",
    "add_tag",
    "remove_tag",
]
