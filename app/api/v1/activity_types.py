from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Path, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.rbac import get_current_admin
from app.core.security import get_current_user
from app.db.mongo import get_mongo_db
from app.schemas.activity_type_schema import ActivityTypeIn, ActivityTypeOut
from app.utils.ids import to_object_id

router = APIRouter(prefix="/activity-types", tags=["activity-types"])


def activity_type_to_out(doc: dict) -> ActivityTypeOut:
    return ActivityTypeOut(
        id=str(doc["_id"]),
        name=doc.get("name", ""),
        owner_id=str(doc["owner_id"]) if doc.get("owner_id") else None,
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


@router.get("", response_model=list[ActivityTypeOut])
async def list_activity_types(db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    # Unlike clients and groups, each admin keeps a private list of activity types
    cursor = db["activity_types"].find({"owner_id": to_object_id(current_user["id"])}).sort("name", 1)
    return [activity_type_to_out(a) async for a in cursor]


@router.get("/{activity_type_id}", response_model=ActivityTypeOut)
async def get_activity_type(
    activity_type_id: str = Path(...),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user=Depends(get_current_user),
):
    doc = await db["activity_types"].find_one({"_id": to_object_id(activity_type_id)})
    if not doc:
        raise HTTPException(status_code=404, detail="Activity type not found")
    return activity_type_to_out(doc)


@router.post("", response_model=ActivityTypeOut, status_code=status.HTTP_201_CREATED)
async def create_activity_type(payload: ActivityTypeIn, db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    now = datetime.utcnow()
    doc = {
        "name": payload.name,
        "owner_id": to_object_id(current_user["id"]),
        "created_at": now,
        "updated_at": now,
    }
    res = await db["activity_types"].insert_one(doc)
    doc["_id"] = res.inserted_id
    return activity_type_to_out(doc)


@router.put("/{activity_type_id}", response_model=ActivityTypeOut)
async def update_activity_type(
    payload: ActivityTypeIn,
    activity_type_id: str = Path(...),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user=Depends(get_current_admin),
):
    owner_q = {"_id": to_object_id(activity_type_id), "owner_id": to_object_id(current_user["id"])}
    res = await db["activity_types"].update_one(owner_q, {"$set": {"name": payload.name, "updated_at": datetime.utcnow()}})
    if res.matched_count == 0:
        raise HTTPException(status_code=404, detail="Activity type not found")
    doc = await db["activity_types"].find_one(owner_q)
    return activity_type_to_out(doc)


@router.delete("/{activity_type_id}")
async def delete_activity_type(
    activity_type_id: str = Path(...),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user=Depends(get_current_admin),
):
    res = await db["activity_types"].delete_one({"_id": to_object_id(activity_type_id), "owner_id": to_object_id(current_user["id"])})
    if res.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Activity type not found")
    return {"status": "deleted", "id": activity_type_id}
