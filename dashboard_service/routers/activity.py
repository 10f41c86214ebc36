# Dashboard Service - Activity Router
"""
API endpoints for users and the activity log.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from dashboard_service.dependencies import authorize, get_store, guarded
from dashboard_service.handlers import ActivityHandler
from dashboard_service.store.base import RecordStore

router = APIRouter(tags=["activity"])


@router.get("/users")
async def list_users(store: RecordStore = Depends(get_store)):
    """Distinct user IDs present in the activity log."""
    handler = ActivityHandler(store)
    return await guarded(handler.users(), "Failed to fetch users")


@router.get("/activity")
async def list_activity(
    user_id: Optional[str] = Query(None, alias="userId", description="Filter by user ID"),
    start_date: Optional[str] = Query(None, alias="startDate", description="First day (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Last day (YYYY-MM-DD)"),
    store: RecordStore = Depends(get_store),
):
    handler = ActivityHandler(store)
    return await guarded(
        handler.activity(user_id, start_date, end_date),
        "Failed to fetch activity logs",
    )


@router.get("/activity/summary", dependencies=[Depends(authorize)])
async def activity_summary(
    user_id: Optional[str] = Query(None, alias="userId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    granularity: str = Query("daily", description="daily, weekly or monthly"),
    store: RecordStore = Depends(get_store),
):
    """
    Activity totals for the period, with the acceptance rate compared to
    the preceding period of equal length.
    """
    handler = ActivityHandler(store)
    return await guarded(
        handler.summary(user_id, start_date, end_date, granularity),
        "Failed to fetch activity summary",
    )
