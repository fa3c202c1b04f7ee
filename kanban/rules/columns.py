from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from kanban.schemas.workflow_column import WorkflowColumn

# Terminal column is recognised by name only; renaming it disables auto-close.
DONE_COLUMN_NAME = "Done"


def sort_columns(columns: list[WorkflowColumn]) -> list[WorkflowColumn]:
    return sorted(columns, key=lambda column: column.position)


def find_column(columns: list[WorkflowColumn], column_id: UUID) -> WorkflowColumn | None:
    for column in columns:
        if column.id == column_id:
            return column
    return None


def get_initial_column(columns: list[WorkflowColumn]) -> WorkflowColumn:
    if not columns:
        raise ValueError("At least one workflow column is required")
    return min(columns, key=lambda column: column.position)


def is_terminal_column(column: WorkflowColumn | None) -> bool:
    return column is not None and column.name == DONE_COLUMN_NAME
