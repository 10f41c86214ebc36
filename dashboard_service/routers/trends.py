# Dashboard Service - Trends Router
"""
API endpoints for productivity, adoption and correlation trends.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from dashboard_service.dependencies import get_store, guarded
from dashboard_service.handlers import TrendsHandler
from dashboard_service.store.base import RecordStore

router = APIRouter(prefix="/trends", tags=["trends"])


@router.get("/productivity")
async def productivity_trends(
    start_date: Optional[str] = Query(None, alias="startDate", description="First day (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Last day (YYYY-MM-DD)"),
    interval: str = Query("day", description="Bucket size (day, week, month)"),
    user_id: Optional[str] = Query(None, alias="userId", description="Filter by user ID"),
    store: RecordStore = Depends(get_store),
):
    """Bucketed productivity metrics with moving averages and growth rates."""
    handler = TrendsHandler(store)
    trends = await guarded(
        handler.productivity(start_date, end_date, interval, user_id),
        "Failed to calculate productivity trends",
    )
    return trends.model_dump(by_alias=True)


@router.get("/adoption")
async def adoption_impact(
    user_id: Optional[str] = Query(None, alias="userId", description="User to analyze"),
    days_before_after: Optional[str] = Query(None, alias="daysBeforeAfter", description="Window length in days"),
    store: RecordStore = Depends(get_store),
):
    """Metrics before and after a user's first recorded activity."""
    handler = TrendsHandler(store)
    comparison = await guarded(
        handler.adoption(user_id, days_before_after),
        "Failed to calculate adoption impact",
    )
    return comparison.model_dump(by_alias=True)


@router.get("/correlation")
async def metric_correlation(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    metric: str = Query("aiCodeLines", description="Target metric"),
    store: RecordStore = Depends(get_store),
):
    handler = TrendsHandler(store)
    result = await guarded(
        handler.correlation(start_date, end_date, metric),
        "Failed to calculate correlations",
    )
    return result.model_dump(by_alias=True)


@router.get("/export")
async def export_trends(
    export_type: Optional[str] = Query(None, alias="type", description="productivity, adoption or correlation"),
    user_id: Optional[str] = Query(None, alias="userId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    store: RecordStore = Depends(get_store),
):
    """Download a trend report as CSV."""
    handler = TrendsHandler(store)
    content, filename = await guarded(
        handler.export(export_type, start_date, end_date, user_id),
        "Failed to export trend data",
    )
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/activity")
async def trend_activity(
    user_id: Optional[str] = Query(None, alias="userId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    store: RecordStore = Depends(get_store),
):
    """Raw activity items backing the trend views."""
    handler = TrendsHandler(store)
    return await guarded(
        handler.activity(user_id, start_date, end_date),
        "Failed to fetch activity logs",
    )
