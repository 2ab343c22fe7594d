from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel


class ActivityTypeIn(CamelModel):
    name: str = Field(min_length=1)


class ActivityTypeOut(CamelModel):
    id: str
    name: str
    owner_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
