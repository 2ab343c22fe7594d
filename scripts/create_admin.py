from __future__ import annotations

import asyncio
import getpass
from datetime import datetime

from app.db.mongo import get_mongo_db, close_mongo_client
from app.core.security import hash_password


async def create_admin(name: str, email: str, password: str) -> bool:
    db = get_mongo_db()
    email = email.strip().lower()
    existing = await db["users"].find_one({"email": email})
    if existing:
        return False
    now = datetime.utcnow()
    await db["users"].insert_one({
        "name": name.strip(),
        "email": email,
        "password_hash": hash_password(password),
        "role": "admin",
        "created_at": now,
        "updated_at": now,
        "last_login": None,
    })
    return True


async def main():
    name = input("Admin name: ")
    email = input("Admin email: ")
    password = getpass.getpass("Admin password: ")
    try:
        if await create_admin(name, email, password):
            print("Admin user created.")
        else:
            print("A user with this email already exists.")
    finally:
        close_mongo_client()


if __name__ == "__main__":
    asyncio.run(main())
