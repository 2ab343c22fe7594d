from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel


class ClientGroupIn(CamelModel):
    name: str = Field(min_length=1)
    client_ids: list[str] = Field(min_length=1)


class GroupMemberOut(CamelModel):
    id: str
    name: str
    hourly_rate: float


class ClientGroupOut(CamelModel):
    id: str
    name: str
    client_ids: list[str]
    clients: list[GroupMemberOut]
    owner_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
