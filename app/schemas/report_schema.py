from datetime import date

from pydantic import Field

from .common import CamelModel
from .time_entry_schema import Target


class ReportClient(CamelModel):
    id: str
    name: str
    hourly_rate: float


class ReportGroup(CamelModel):
    """A client group with its still-existing member clients resolved."""

    id: str
    name: str
    members: list[ReportClient] = Field(default_factory=list)


class ReportSourceEntry(CamelModel):
    """A time entry as read for aggregation, activity type name already joined."""

    id: str
    date: date
    hours: float
    description: str
    activity_type: str = ""
    target: Target


class ReportLineItem(CamelModel):
    id: str
    date: date
    hours: float
    description: str
    activity_type: str


class ClientReport(CamelModel):
    client: ReportClient
    total_hours: float = 0.0
    total_value: float = 0.0
    entries: list[ReportLineItem] = Field(default_factory=list)


class ReportPeriod(CamelModel):
    start_date: date
    end_date: date


class ReportSummary(CamelModel):
    total_hours: float = 0.0
    total_value: float = 0.0
    client_count: int = 0


class BillingReport(CamelModel):
    period: ReportPeriod
    summary: ReportSummary
    clients: list[ClientReport]
