from datetime import datetime
from typing import Any

from pydantic import BaseModel


class ActivityLogOut(BaseModel):
    id: str
    actor: str | None
    action: str
    entity_type: str | None
    entity_id: str | None
    details: dict[str, Any]
    created_at: datetime

    model_config = {"from_attributes": True}
