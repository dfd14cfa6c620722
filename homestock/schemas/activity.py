"""Activity feed schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ActivityResponse(BaseModel):
    """Activity ledger entry."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    household_id: int
    user_id: int
    activity_type: str
    description: str
    item_id: int | None
    item_type: str | None
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias="activity_metadata")
    created_at: datetime
