from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

from bson import ObjectId

from app.db.mongo import get_mongo_db, close_mongo_client
from app.db.mongo_indexes import ensure_indexes
from app.core.security import hash_password


ADMIN_ID = ObjectId("6562a0f0a0a0a0a0a0a0a0a1")  # stable ids for idempotence


async def seed_users(db):
    now = datetime.utcnow()
    users = [
        {
            "_id": ADMIN_ID,
            "name": "Admin User",
            "email": "admin@example.com",
            "password_hash": hash_password("admin12345"),
            "role": "admin",
            "created_at": now,
            "updated_at": now,
            "last_login": None,
        },
        {
            "_id": ObjectId("6562a0f0a0a0a0a0a0a0a0a2"),
            "name": "Vera Viewer",
            "email": "viewer@example.com",
            "password_hash": hash_password("viewer12345"),
            "role": "viewer",
            "created_at": now,
            "updated_at": now,
            "last_login": None,
        },
    ]
    for u in users:
        await db["users"].update_one({"email": u["email"]}, {"$setOnInsert": u}, upsert=True)
    return users


async def seed_clients(db):
    now = datetime.utcnow()
    clients = [
        {"_id": ObjectId("6562a0f0a0a0a0a0a0a0a0c1"), "name": "Acme Ltd", "tax_id": "11.222.333/0001-44", "email": "billing@acme.example.com", "hourly_rate": 100.0},
        {"_id": ObjectId("6562a0f0a0a0a0a0a0a0a0c2"), "name": "Globex", "email": "ap@globex.example.com", "hourly_rate": 200.0},
        {"_id": ObjectId("6562a0f0a0a0a0a0a0a0a0c3"), "name": "Initech", "hourly_rate": 150.0},
    ]
    for c in clients:
        c.update({"owner_id": ADMIN_ID, "created_at": now, "updated_at": now})
        await db["clients"].update_one({"_id": c["_id"]}, {"$setOnInsert": c}, upsert=True)
    return clients


async def seed_groups(db, clients):
    now = datetime.utcnow()
    group = {
        "_id": ObjectId("6562a0f0a0a0a0a0a0a0a0d1"),
        "name": "Shared infrastructure",
        "client_ids": [clients[0]["_id"], clients[1]["_id"]],
        "owner_id": ADMIN_ID,
        "created_at": now,
        "updated_at": now,
    }
    await db["client_groups"].update_one({"_id": group["_id"]}, {"$setOnInsert": group}, upsert=True)
    return group


async def seed_activity_types(db):
    now = datetime.utcnow()
    items = [
        (ObjectId("6562a0f0a0a0a0a0a0a0a0e1"), "Consulting"),
        (ObjectId("6562a0f0a0a0a0a0a0a0a0e2"), "Development"),
        (ObjectId("6562a0f0a0a0a0a0a0a0a0e3"), "Support"),
    ]
    out = []
    for oid, name in items:
        doc = {"_id": oid, "name": name, "owner_id": ADMIN_ID, "created_at": now, "updated_at": now}
        await db["activity_types"].update_one({"_id": oid}, {"$setOnInsert": doc}, upsert=True)
        out.append(doc)
    return out


async def seed_time_entries(db, clients, group, activity_types):
    now = datetime.utcnow()
    today = datetime(now.year, now.month, now.day)
    entries = [
        (ObjectId("6562a0f0a0a0a0a0a0a0a0f1"), 1, 2.0, "Kick-off meeting", 0, {"type": "client", "id": clients[0]["_id"]}),
        (ObjectId("6562a0f0a0a0a0a0a0a0a0f2"), 2, 4.0, "Server maintenance", 2, {"type": "group", "id": group["_id"]}),
        (ObjectId("6562a0f0a0a0a0a0a0a0a0f3"), 3, 6.5, "API integration", 1, {"type": "client", "id": clients[2]["_id"]}),
    ]
    for oid, days_ago, hours, description, activity_idx, target in entries:
        doc = {
            "_id": oid,
            "date": today - timedelta(days=days_ago),
            "hours": hours,
            "description": description,
            "activity_type_id": activity_types[activity_idx]["_id"],
            "target": target,
            "owner_id": ADMIN_ID,
            "created_at": now,
            "updated_at": now,
        }
        await db["time_entries"].update_one({"_id": oid}, {"$setOnInsert": doc}, upsert=True)


async def main():
    db = get_mongo_db()
    # Ensure indexes before inserting
    await ensure_indexes(db)

    await seed_users(db)
    clients = await seed_clients(db)
    group = await seed_groups(db, clients)
    activity_types = await seed_activity_types(db)
    await seed_time_entries(db, clients, group, activity_types)

    print("MongoDB seed completed.")
    close_mongo_client()


if __name__ == "__main__":
    asyncio.run(main())
