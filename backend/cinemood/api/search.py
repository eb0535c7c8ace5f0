"""
search.py - Movie title search endpoint
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from cinemood.api.deps import get_tmdb_client
from cinemood.core.exceptions import ClientInputError
from cinemood.schemas import ERROR_RESPONSES, PagedResults
from cinemood.services.tmdb_client import TMDBClient

logger = logging.getLogger(__name__)
router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/search", response_model=PagedResults)
async def search_movies(
    query: Optional[str] = Query(None, description="Search query"),
    page: int = Query(1, ge=1),
    client: TMDBClient = Depends(get_tmdb_client),
):
    if not query or not query.strip():
        raise ClientInputError("Search query is required")

    data = await client.search_movies(query, page)
    results = PagedResults.from_tmdb(data, page=page)
    logger.info(f"Search for '{query}' page {page} returned {len(results.results)} of {results.total_results} results")
    return results
