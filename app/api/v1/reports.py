from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.security import get_current_user
from app.db.mongo import get_mongo_db
from app.schemas.report_schema import BillingReport
from app.services.report_service import generate_billing_report

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("", response_model=BillingReport)
async def billing_report(
    start_date: Optional[date] = Query(None, alias="startDate", description="First day, YYYY-MM-DD (inclusive)"),
    end_date: Optional[date] = Query(None, alias="endDate", description="Last day, YYYY-MM-DD (inclusive)"),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user=Depends(get_current_user),
):
    # Viewers and admins alike may read reports
    if start_date is None or end_date is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="startDate and endDate are required")
    return await generate_billing_report(db, start_date, end_date)
