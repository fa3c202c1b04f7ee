"""Business-rule failures raised by the command layer.

These are distinct from structural validation failures (``pydantic.ValidationError``)
and from storage failures, which propagate from the backend unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class DomainErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    COLUMN_NOT_FOUND = "COLUMN_NOT_FOUND"
    TICKET_ALREADY_CLOSED = "TICKET_ALREADY_CLOSED"
    TICKET_NOT_CLOSED = "TICKET_NOT_CLOSED"
    TAG_ALREADY_EXISTS = "TAG_ALREADY_EXISTS"
    TAG_NOT_FOUND = "TAG_NOT_FOUND"
    SAME_COLUMN = "SAME_COLUMN"
    SAME_ASSIGNEE = "SAME_ASSIGNEE"


class DomainError(Exception):
    def __init__(self, code: DomainErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message}

    def __repr__(self) -> str:
        return f"DomainError(code={self.code.value}, message={self.message!r})"
