from datetime import date, datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from .common import CamelModel


class ClientTarget(CamelModel):
    type: Literal["client"] = "client"
    id: str


class GroupTarget(CamelModel):
    type: Literal["group"] = "group"
    id: str


# Billing destination of an entry: one client, or a group prorated across members
Target = Annotated[Union[ClientTarget, GroupTarget], Field(discriminator="type")]

target_adapter: TypeAdapter = TypeAdapter(Target)


class TimeEntryIn(CamelModel):
    date: date
    hours: float = Field(ge=0.1)
    description: str = Field(min_length=1)
    activity_type_id: str
    target: Target


class TimeEntryOut(CamelModel):
    id: str
    date: date
    hours: float
    description: str
    activity_type_id: str
    activity_type: Optional[str] = None
    target: Target
    owner_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
