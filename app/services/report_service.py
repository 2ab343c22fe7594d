"""Per-client billing report over a date range.

The aggregation itself (`build_billing_report`) is pure: it works on a
snapshot of entries, clients and groups and never touches the database.
`load_report_snapshot` reads that snapshot from Mongo.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Mapping

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from app.schemas.report_schema import (
    BillingReport,
    ClientReport,
    ReportClient,
    ReportGroup,
    ReportLineItem,
    ReportPeriod,
    ReportSourceEntry,
    ReportSummary,
)
from app.schemas.time_entry_schema import ClientTarget, GroupTarget, target_adapter
from app.utils.dates import as_date, day_range_query


logger = logging.getLogger("uvicorn.error")


def group_split_description(description: str, group_name: str) -> str:
    return f"{description} (group split: {group_name})"


def _credit(
    report_by_client: dict[str, ClientReport],
    client: ReportClient,
    entry: ReportSourceEntry,
    hours: float,
    description: str,
) -> None:
    acc = report_by_client.get(client.id)
    if acc is None:
        acc = ClientReport(client=client)
        report_by_client[client.id] = acc
    acc.total_hours += hours
    acc.total_value += hours * client.hourly_rate
    acc.entries.append(ReportLineItem(
        id=entry.id,
        date=entry.date,
        hours=hours,
        description=description,
        activity_type=entry.activity_type,
    ))


def build_billing_report(
    start_date: date,
    end_date: date,
    entries: Iterable[ReportSourceEntry],
    clients: Mapping[str, ReportClient],
    groups: Mapping[str, ReportGroup],
) -> BillingReport:
    """Aggregate hours and value per client.

    Entries targeting a missing client, a missing group or a group without
    members are skipped. Group entries are split evenly between members.
    Results are sorted by total value, highest first; ties keep the order in
    which clients were first credited.
    """
    report_by_client: dict[str, ClientReport] = {}
    skipped = 0

    for entry in entries:
        target = entry.target
        if isinstance(target, ClientTarget):
            client = clients.get(target.id)
            if client is None:
                skipped += 1
                continue
            _credit(report_by_client, client, entry, entry.hours, entry.description)
        elif isinstance(target, GroupTarget):
            group = groups.get(target.id)
            if group is None or not group.members:
                skipped += 1
                continue
            hours_per_client = entry.hours / len(group.members)
            description = group_split_description(entry.description, group.name)
            for member in group.members:
                _credit(report_by_client, member, entry, hours_per_client, description)
        else:
            raise TypeError(f"Unsupported time entry target: {target!r}")

    if skipped:
        logger.debug("Billing report skipped %d entries with dangling targets", skipped)

    rows = sorted(report_by_client.values(), key=lambda r: r.total_value, reverse=True)
    summary = ReportSummary(
        total_hours=sum(r.total_hours for r in rows),
        total_value=sum(r.total_value for r in rows),
        client_count=len(rows),
    )
    return BillingReport(
        period=ReportPeriod(start_date=start_date, end_date=end_date),
        summary=summary,
        clients=rows,
    )


async def load_report_snapshot(
    db: AsyncIOMotorDatabase,
    start_date: date,
    end_date: date,
) -> tuple[list[ReportSourceEntry], dict[str, ReportClient], dict[str, ReportGroup]]:
    # Activity types are only needed for their display names
    activity_names: dict[str, str] = {}
    async for a in db["activity_types"].find({}, {"name": 1}):
        activity_names[str(a["_id"])] = a.get("name", "")

    clients: dict[str, ReportClient] = {}
    async for c in db["clients"].find({}):
        clients[str(c["_id"])] = ReportClient(
            id=str(c["_id"]),
            name=c.get("name", ""),
            hourly_rate=float(c.get("hourly_rate", 0.0)),
        )

    groups: dict[str, ReportGroup] = {}
    async for g in db["client_groups"].find({}):
        # Members deleted since the group was saved no longer count towards the split
        members = [clients[str(cid)] for cid in g.get("client_ids", []) if str(cid) in clients]
        groups[str(g["_id"])] = ReportGroup(id=str(g["_id"]), name=g.get("name", ""), members=members)

    entries: list[ReportSourceEntry] = []
    cursor = db["time_entries"].find({"date": day_range_query(start_date, end_date)}).sort([("date", 1), ("_id", 1)])
    async for doc in cursor:
        raw_target = doc.get("target") or {}
        try:
            target = target_adapter.validate_python({"type": raw_target.get("type"), "id": str(raw_target.get("id"))})
        except ValidationError:
            logger.warning("Time entry %s has an unknown target type; ignoring it", doc["_id"])
            continue
        entries.append(ReportSourceEntry(
            id=str(doc["_id"]),
            date=as_date(doc["date"]),
            hours=float(doc.get("hours", 0.0)),
            description=doc.get("description", ""),
            activity_type=activity_names.get(str(doc.get("activity_type_id")), ""),
            target=target,
        ))
    return entries, clients, groups


async def generate_billing_report(db: AsyncIOMotorDatabase, start_date: date, end_date: date) -> BillingReport:
    entries, clients, groups = await load_report_snapshot(db, start_date, end_date)
    report = build_billing_report(start_date, end_date, entries, clients, groups)
    logger.info(
        "Billing report %s..%s: %d entries, %d clients",
        start_date.isoformat(), end_date.isoformat(), len(entries), report.summary.client_count,
    )
    return report
