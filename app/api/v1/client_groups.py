from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Path, status
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.rbac import get_current_admin
from app.db.mongo import get_mongo_db
from app.schemas.client_group_schema import ClientGroupIn, ClientGroupOut, GroupMemberOut
from app.utils.ids import to_object_id

router = APIRouter(prefix="/client-groups", tags=["client-groups"])


async def _resolve_members(db: AsyncIOMotorDatabase, client_ids: list[ObjectId]) -> list[GroupMemberOut]:
    found: dict[ObjectId, dict] = {}
    async for c in db["clients"].find({"_id": {"$in": client_ids}}):
        found[c["_id"]] = c
    # Keep membership order; deleted clients simply drop out
    return [
        GroupMemberOut(id=str(cid), name=found[cid].get("name", ""), hourly_rate=float(found[cid].get("hourly_rate", 0.0)))
        for cid in client_ids
        if cid in found
    ]


async def group_to_out(db: AsyncIOMotorDatabase, doc: dict) -> ClientGroupOut:
    client_ids = list(doc.get("client_ids", []))
    return ClientGroupOut(
        id=str(doc["_id"]),
        name=doc.get("name", ""),
        client_ids=[str(c) for c in client_ids],
        clients=await _resolve_members(db, client_ids),
        owner_id=str(doc["owner_id"]) if doc.get("owner_id") else None,
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


async def _validated_client_ids(db: AsyncIOMotorDatabase, raw_ids: list[str]) -> list[ObjectId]:
    # Membership is a set; ids that differ only in hex case are the same client
    client_ids = list(dict.fromkeys(to_object_id(cid) for cid in raw_ids))
    existing = await db["clients"].count_documents({"_id": {"$in": client_ids}})
    if existing != len(client_ids):
        raise HTTPException(status_code=400, detail="One or more clients do not exist")
    return client_ids


@router.get("", response_model=list[ClientGroupOut])
async def list_client_groups(db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    cursor = db["client_groups"].find({}).sort("name", 1)
    return [await group_to_out(db, g) async for g in cursor]


@router.post("", response_model=ClientGroupOut, status_code=status.HTTP_201_CREATED)
async def create_client_group(payload: ClientGroupIn, db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    now = datetime.utcnow()
    doc = {
        "name": payload.name,
        "client_ids": await _validated_client_ids(db, payload.client_ids),
        "owner_id": to_object_id(current_user["id"]),
        "created_at": now,
        "updated_at": now,
    }
    res = await db["client_groups"].insert_one(doc)
    doc["_id"] = res.inserted_id
    return await group_to_out(db, doc)


@router.put("/{group_id}", response_model=ClientGroupOut)
async def update_client_group(
    payload: ClientGroupIn,
    group_id: str = Path(...),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user=Depends(get_current_admin),
):
    group_oid = to_object_id(group_id)
    owner_q = {"_id": group_oid, "owner_id": to_object_id(current_user["id"])}
    if not await db["client_groups"].find_one(owner_q):
        raise HTTPException(status_code=404, detail="Group not found")
    update = {
        "name": payload.name,
        "client_ids": await _validated_client_ids(db, payload.client_ids),
        "updated_at": datetime.utcnow(),
    }
    await db["client_groups"].update_one(owner_q, {"$set": update})
    doc = await db["client_groups"].find_one({"_id": group_oid})
    return await group_to_out(db, doc)


@router.delete("/{group_id}")
async def delete_client_group(group_id: str = Path(...), db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    res = await db["client_groups"].delete_one({"_id": to_object_id(group_id), "owner_id": to_object_id(current_user["id"])})
    if res.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Group not found")
    return {"status": "deleted", "id": group_id}
