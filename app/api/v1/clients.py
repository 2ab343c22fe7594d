from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Path, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.rbac import get_current_admin
from app.db.mongo import get_mongo_db
from app.schemas.client_schema import ClientIn, ClientUpdate, ClientOut
from app.utils.ids import to_object_id

router = APIRouter(prefix="/clients", tags=["clients"])


def client_to_out(doc: dict) -> ClientOut:
    return ClientOut(
        id=str(doc["_id"]),
        name=doc.get("name", ""),
        tax_id=doc.get("tax_id"),
        email=doc.get("email"),
        hourly_rate=float(doc.get("hourly_rate", 0.0)),
        owner_id=str(doc["owner_id"]) if doc.get("owner_id") else None,
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


async def _ensure_unique_tax_id(db: AsyncIOMotorDatabase, tax_id: str, exclude_id=None) -> None:
    q: dict = {"tax_id": tax_id}
    if exclude_id is not None:
        q["_id"] = {"$ne": exclude_id}
    if await db["clients"].find_one(q):
        raise HTTPException(status_code=400, detail="Client with this tax id already exists")


@router.get("", response_model=list[ClientOut])
async def list_clients(db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    # Admins see every client, not only the ones they created
    cursor = db["clients"].find({}).sort("name", 1)
    return [client_to_out(c) async for c in cursor]


@router.get("/{client_id}", response_model=ClientOut)
async def get_client(client_id: str = Path(...), db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    doc = await db["clients"].find_one({"_id": to_object_id(client_id)})
    if not doc:
        raise HTTPException(status_code=404, detail="Client not found")
    return client_to_out(doc)


@router.post("", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
async def create_client(payload: ClientIn, db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    now = datetime.utcnow()
    doc = {
        "name": payload.name,
        "email": payload.email.lower() if payload.email else None,
        "hourly_rate": float(payload.hourly_rate),
        "owner_id": to_object_id(current_user["id"]),
        "created_at": now,
        "updated_at": now,
    }
    # Sparse unique index: only store tax_id when present
    if payload.tax_id:
        await _ensure_unique_tax_id(db, payload.tax_id)
        doc["tax_id"] = payload.tax_id
    res = await db["clients"].insert_one(doc)
    doc["_id"] = res.inserted_id
    return client_to_out(doc)


@router.put("/{client_id}", response_model=ClientOut)
async def update_client(
    payload: ClientUpdate,
    client_id: str = Path(...),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user=Depends(get_current_admin),
):
    client_oid = to_object_id(client_id)
    owner_q = {"_id": client_oid, "owner_id": to_object_id(current_user["id"])}
    if not await db["clients"].find_one(owner_q):
        raise HTTPException(status_code=404, detail="Client not found")
    data = payload.model_dump(exclude_unset=True)
    update: dict = {}
    unset: dict = {}
    if data.get("name"):
        update["name"] = data["name"]
    if data.get("hourly_rate") is not None:
        update["hourly_rate"] = float(data["hourly_rate"])  # normalize
    if "email" in data:
        if data["email"]:
            update["email"] = data["email"].lower()
        else:
            update["email"] = None
    if "tax_id" in data:
        if data["tax_id"]:
            await _ensure_unique_tax_id(db, data["tax_id"], exclude_id=client_oid)
            update["tax_id"] = data["tax_id"]
        else:
            unset["tax_id"] = ""
    update["updated_at"] = datetime.utcnow()
    ops: dict = {"$set": update}
    if unset:
        ops["$unset"] = unset
    await db["clients"].update_one(owner_q, ops)
    doc = await db["clients"].find_one({"_id": client_oid})
    return client_to_out(doc)


@router.delete("/{client_id}")
async def delete_client(client_id: str = Path(...), db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    # Groups and entries referencing the client are left alone; reports skip them
    res = await db["clients"].delete_one({"_id": to_object_id(client_id), "owner_id": to_object_id(current_user["id"])})
    if res.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Client not found")
    return {"status": "deleted", "id": client_id}
