import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from app.core.rbac import get_current_admin
from app.db.mongo import get_mongo_db
from app.schemas.time_entry_schema import ClientTarget, TimeEntryIn, TimeEntryOut, target_adapter
from app.utils.dates import as_date, day_range_query, start_of_day
from app.utils.ids import to_object_id

router = APIRouter(prefix="/time-entries", tags=["time-entries"])

logger = logging.getLogger("uvicorn.error")


async def _activity_type_name(db: AsyncIOMotorDatabase, activity_type_id) -> Optional[str]:
    a = await db["activity_types"].find_one({"_id": activity_type_id}, {"name": 1})
    return a.get("name") if a else None


def parse_stored_target(doc: dict):
    raw = doc.get("target") or {}
    return target_adapter.validate_python({"type": raw.get("type"), "id": str(raw.get("id"))})


def entry_to_out(doc: dict, activity_type: Optional[str], target=None) -> TimeEntryOut:
    return TimeEntryOut(
        id=str(doc["_id"]),
        date=as_date(doc["date"]),
        hours=float(doc.get("hours", 0.0)),
        description=doc.get("description", ""),
        activity_type_id=str(doc.get("activity_type_id")),
        activity_type=activity_type,
        target=target if target is not None else parse_stored_target(doc),
        owner_id=str(doc["owner_id"]) if doc.get("owner_id") else None,
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


async def _entry_fields(db: AsyncIOMotorDatabase, payload: TimeEntryIn) -> dict:
    """Validate references of an incoming entry and build its stored fields."""
    activity_oid = to_object_id(payload.activity_type_id)
    if not await db["activity_types"].find_one({"_id": activity_oid}):
        raise HTTPException(status_code=400, detail="Invalid activity type")
    target_oid = to_object_id(payload.target.id)
    if isinstance(payload.target, ClientTarget):
        exists = await db["clients"].find_one({"_id": target_oid})
    else:
        exists = await db["client_groups"].find_one({"_id": target_oid})
    if not exists:
        raise HTTPException(status_code=400, detail=f"Invalid {payload.target.type} target")
    return {
        "date": start_of_day(payload.date),
        "hours": float(payload.hours),
        "description": payload.description,
        "activity_type_id": activity_oid,
        "target": {"type": payload.target.type, "id": target_oid},
    }


@router.get("", response_model=list[TimeEntryOut])
async def list_time_entries(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user=Depends(get_current_admin),
):
    q: dict = {}
    window = day_range_query(start_date, end_date)
    if window:
        q["date"] = window
    names: dict[str, str] = {}
    async for a in db["activity_types"].find({}, {"name": 1}):
        names[str(a["_id"])] = a.get("name", "")
    cursor = db["time_entries"].find(q).sort([("date", -1), ("_id", -1)])
    out: list[TimeEntryOut] = []
    async for e in cursor:
        try:
            target = parse_stored_target(e)
        except ValidationError:
            logger.warning("Time entry %s has an unknown target type; leaving it out of the listing", e["_id"])
            continue
        out.append(entry_to_out(e, names.get(str(e.get("activity_type_id"))), target))
    return out


@router.post("", response_model=TimeEntryOut, status_code=status.HTTP_201_CREATED)
async def create_time_entry(payload: TimeEntryIn, db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    doc = await _entry_fields(db, payload)
    now = datetime.utcnow()
    doc.update({
        "owner_id": to_object_id(current_user["id"]),
        "created_at": now,
        "updated_at": now,
    })
    res = await db["time_entries"].insert_one(doc)
    doc["_id"] = res.inserted_id
    return entry_to_out(doc, await _activity_type_name(db, doc["activity_type_id"]))


@router.put("/{entry_id}", response_model=TimeEntryOut)
async def update_time_entry(
    payload: TimeEntryIn,
    entry_id: str = Path(...),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user=Depends(get_current_admin),
):
    entry_oid = to_object_id(entry_id)
    owner_q = {"_id": entry_oid, "owner_id": to_object_id(current_user["id"])}
    if not await db["time_entries"].find_one(owner_q):
        raise HTTPException(status_code=404, detail="Time entry not found")
    update = await _entry_fields(db, payload)
    update["updated_at"] = datetime.utcnow()
    await db["time_entries"].update_one(owner_q, {"$set": update})
    doc = await db["time_entries"].find_one({"_id": entry_oid})
    return entry_to_out(doc, await _activity_type_name(db, doc["activity_type_id"]))


@router.delete("/{entry_id}")
async def delete_time_entry(entry_id: str = Path(...), db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    res = await db["time_entries"].delete_one({"_id": to_object_id(entry_id), "owner_id": to_object_id(current_user["id"])})
    if res.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Time entry not found")
    return {"status": "deleted", "id": entry_id}
