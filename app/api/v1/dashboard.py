from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.rbac import get_current_admin
from app.db.mongo import get_mongo_db
from app.schemas.dashboard_schema import SummaryMetrics
from app.utils.ids import to_object_id


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=SummaryMetrics)
async def dashboard_summary(
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user=Depends(get_current_admin),
):
    clients = await db["clients"].count_documents({})
    client_groups = await db["client_groups"].count_documents({})
    # Activity types are per admin, as in the activity type listing
    activity_types = await db["activity_types"].count_documents({"owner_id": to_object_id(current_user["id"])})
    time_entries = await db["time_entries"].count_documents({})
    total_hours = 0.0
    async for e in db["time_entries"].find({}, {"hours": 1}):
        total_hours += float(e.get("hours", 0.0))
    return SummaryMetrics(
        clients=clients,
        client_groups=client_groups,
        activity_types=activity_types,
        time_entries=time_entries,
        total_hours=total_hours,
    )
