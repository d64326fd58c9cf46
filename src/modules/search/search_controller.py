# src/modules/search/search_controller.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.common.cache import production_cache
from src.common.config import settings
from src.common.schemas import ErrorResponse, ResponseEnvelope, ok
from src.modules.search import schemas
from src.modules.search.dependencies import get_search_service
from src.modules.search.search_service import SearchService

router = APIRouter(prefix="/search", tags=["search"])

@router.get(
    "",
    response_model=ResponseEnvelope[schemas.SearchResponse],
    responses={
        422: {"model": ErrorResponse, "description": "Parameters failed validation"},
        500: {"model": ErrorResponse, "description": "Server error occurred"},
    },
    dependencies=[Depends(production_cache(settings.SEARCH_CACHE_MAX_AGE))],
)
async def search(
    q: str = Query(..., description="Search query"),
    types: Optional[List[schemas.SearchResultType]] = Query(None, alias="types[]"),
    skip: Optional[int] = Query(None, description="Number of results to skip"),
    take: Optional[int] = Query(None, description=f"Number of results to return (max {settings.SEARCH_MAX_TAKE})"),
    search_service: SearchService = Depends(get_search_service),
):
    """
    Global search endpoint.

    Returns courses and instructors whose name matches the query, ranked by
    relevance. Each item carries a `type` of `course` or `instructor`;
    `totalCount` counts all matches before pagination.
    """
    results = await search_service.search(
        {"query_text": q, "result_types": types, "skip": skip, "take": take}
    )
    return ok(results)
