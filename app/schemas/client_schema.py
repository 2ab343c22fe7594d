from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from .common import CamelModel


class ClientIn(CamelModel):
    name: str = Field(min_length=1)
    tax_id: Optional[str] = None
    email: Optional[EmailStr] = None
    hourly_rate: float = Field(ge=0)

    @field_validator("tax_id")
    @classmethod
    def _blank_tax_id(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ClientUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    tax_id: Optional[str] = None
    email: Optional[EmailStr] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)


class ClientOut(CamelModel):
    id: str
    name: str
    tax_id: Optional[str] = None
    email: Optional[str] = None
    hourly_rate: float
    owner_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
