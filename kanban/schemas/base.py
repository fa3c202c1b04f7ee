from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict

from kanban.utils.time import ensure_utc

Timestamp = Annotated[datetime, AfterValidator(ensure_utc)]


class EntityModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
