# Dashboard Service - Prompts Router
"""
API endpoints for the prompt log and prompt analytics.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from dashboard_service.dependencies import get_store, guarded
from dashboard_service.handlers import PromptsHandler
from dashboard_service.store.base import RecordStore

router = APIRouter(prefix="/prompts", tags=["prompts"])


class PromptFilters:
    """User and date-range query parameters shared by the analytics endpoints."""

    def __init__(
        self,
        user_id: Optional[str] = Query(None, alias="userId", description="Filter by user ID"),
        start_date: Optional[str] = Query(None, alias="startDate", description="First day (YYYY-MM-DD)"),
        end_date: Optional[str] = Query(None, alias="endDate", description="Last day (YYYY-MM-DD)"),
    ):
        self.user_id = user_id
        self.start_date = start_date
        self.end_date = end_date

    def args(self):
        return self.user_id, self.start_date, self.end_date


@router.get("")
async def list_prompts(
    filters: PromptFilters = Depends(),
    search_term: Optional[str] = Query(None, alias="searchTerm", description="Substring of prompt or response"),
    limit: Optional[str] = Query(None, description="Page size (default 50)"),
    page: Optional[str] = Query(None, description="1-based page number"),
    include_empty: Optional[str] = Query(None, alias="includeEmpty", description="Keep empty prompt/response pairs"),
    store: RecordStore = Depends(get_store),
):
    """Newest-first page of prompt log items."""
    handler = PromptsHandler(store)
    return await guarded(
        handler.list_prompts(*filters.args(), search_term, limit, page, include_empty),
        "Failed to fetch prompt logs",
    )


@router.get("/analysis")
async def prompt_analysis(filters: PromptFilters = Depends(), store: RecordStore = Depends(get_store)):
    handler = PromptsHandler(store)
    return await guarded(handler.analysis(*filters.args()), "Failed to analyze prompts")


@router.get("/categories")
async def prompt_categories(filters: PromptFilters = Depends(), store: RecordStore = Depends(get_store)):
    handler = PromptsHandler(store)
    return await guarded(handler.categories(*filters.args()), "Failed to fetch prompt categories")


@router.get("/category-distribution")
async def prompt_category_distribution(filters: PromptFilters = Depends(), store: RecordStore = Depends(get_store)):
    handler = PromptsHandler(store)
    return await guarded(
        handler.category_distribution(*filters.args()),
        "Failed to fetch prompt category distribution",
    )


@router.get("/type-distribution")
async def prompt_type_distribution(filters: PromptFilters = Depends(), store: RecordStore = Depends(get_store)):
    handler = PromptsHandler(store)
    return await guarded(handler.type_distribution(*filters.args()), "Failed to fetch prompt type distribution")


@router.get("/length-distribution")
async def prompt_length_distribution(filters: PromptFilters = Depends(), store: RecordStore = Depends(get_store)):
    handler = PromptsHandler(store)
    return await guarded(
        handler.length_distribution(*filters.args()),
        "Failed to fetch prompt length distribution",
    )


@router.get("/patterns")
async def prompt_patterns(filters: PromptFilters = Depends(), store: RecordStore = Depends(get_store)):
    handler = PromptsHandler(store)
    return await guarded(handler.patterns(*filters.args()), "Failed to fetch prompt patterns")


@router.get("/response-quality")
async def prompt_response_quality(filters: PromptFilters = Depends(), store: RecordStore = Depends(get_store)):
    handler = PromptsHandler(store)
    return await guarded(handler.response_quality(*filters.args()), "Failed to fetch response quality metrics")


@router.get("/time-analysis")
async def prompt_time_analysis(filters: PromptFilters = Depends(), store: RecordStore = Depends(get_store)):
    handler = PromptsHandler(store)
    return await guarded(handler.time_analysis(*filters.args()), "Failed to fetch prompt time analysis")
