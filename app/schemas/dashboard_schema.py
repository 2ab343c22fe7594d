from .common import CamelModel


class SummaryMetrics(CamelModel):
    clients: int = 0
    client_groups: int = 0
    activity_types: int = 0
    time_entries: int = 0
    total_hours: float = 0.0
