from motor.motor_asyncio import AsyncIOMotorDatabase
from app.db.mongo import get_mongo_db


async def ensure_indexes(db: AsyncIOMotorDatabase | None = None) -> None:
    """Create required MongoDB indexes (idempotent)."""
    if db is None:
        db = get_mongo_db()

    users = db["users"]
    # Login lookups and uniqueness of accounts
    await users.create_index([("email", 1)], unique=True, name="uniq_email")

    clients = db["clients"]
    # Tax id is optional, so uniqueness only applies to documents carrying it
    await clients.create_index([("tax_id", 1)], unique=True, sparse=True, name="uniq_client_tax_id")
    await clients.create_index([("name", 1)], name="idx_client_name")
    await clients.create_index([("owner_id", 1)], name="idx_client_owner")

    client_groups = db["client_groups"]
    # Membership lookups (which groups reference a client)
    await client_groups.create_index([("client_ids", 1)], name="idx_group_client_ids")
    await client_groups.create_index([("owner_id", 1)], name="idx_group_owner")

    activity_types = db["activity_types"]
    await activity_types.create_index([("owner_id", 1), ("name", 1)], name="idx_activity_owner_name")

    time_entries = db["time_entries"]
    # Date range scans for reports
    await time_entries.create_index([("date", 1)], name="idx_te_date")
    await time_entries.create_index([("target.type", 1), ("target.id", 1)], name="idx_te_target")
    await time_entries.create_index([("owner_id", 1), ("date", -1)], name="idx_te_owner_date")
