from datetime import datetime
from enum import Enum
from fastapi import APIRouter, Depends, HTTPException, Path, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.rbac import get_current_admin
from app.core.security import hash_password, user_to_out
from app.db.mongo import get_mongo_db
from app.schemas.auth_schema import UserOut
from app.schemas.user_schema import UserIn, UserUpdate
from app.utils.ids import to_object_id

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserOut])
async def list_users(db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    cursor = db["users"].find({}, {"password_hash": 0}).sort("name", 1)
    return [user_to_out(u) async for u in cursor]


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserIn, db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    email = payload.email.lower()
    existing = await db["users"].find_one({"email": email})
    if existing:
        raise HTTPException(status_code=400, detail="User with this email already exists")
    now = datetime.utcnow()
    doc = {
        "name": payload.name.strip(),
        "email": email,
        "password_hash": hash_password(payload.password),
        "role": payload.role.value,
        "created_at": now,
        "updated_at": now,
        "last_login": None,
    }
    res = await db["users"].insert_one(doc)
    doc["_id"] = res.inserted_id
    return user_to_out(doc)


@router.put("/{user_id}", response_model=UserOut)
async def update_user(
    payload: UserUpdate,
    user_id: str = Path(...),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user=Depends(get_current_admin),
):
    user_oid = to_object_id(user_id)
    user = await db["users"].find_one({"_id": user_oid})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    update: dict = {}
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in data:
        update["name"] = data["name"].strip()
    if "email" in data:
        email = data["email"].lower()
        exists = await db["users"].find_one({"email": email, "_id": {"$ne": user_oid}})
        if exists:
            raise HTTPException(status_code=400, detail="User with this email already exists")
        update["email"] = email
    if "password" in data:
        update["password_hash"] = hash_password(data["password"])
    if "role" in data:
        # Coerce Enum to its value
        update["role"] = data["role"].value if isinstance(data["role"], Enum) else data["role"]
    update["updated_at"] = datetime.utcnow()
    await db["users"].update_one({"_id": user_oid}, {"$set": update})
    user = await db["users"].find_one({"_id": user_oid})
    return user_to_out(user)


@router.delete("/{user_id}")
async def delete_user(user_id: str = Path(...), db: AsyncIOMotorDatabase = Depends(get_mongo_db), current_user=Depends(get_current_admin)):
    user_oid = to_object_id(user_id)
    if str(user_oid) == current_user["id"]:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    res = await db["users"].delete_one({"_id": user_oid})
    if res.deleted_count == 0:
        raise HTTPException(status_code=404, detail="User not found")
    return {"status": "deleted", "id": user_id}
