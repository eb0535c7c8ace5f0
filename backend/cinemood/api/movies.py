"""
movies.py - Movie and TV listing endpoints (TMDB pass-through with paging metadata)
"""
from fastapi import APIRouter, Depends, Query
from typing import Any, Dict, Optional
import asyncio
import logging

from cinemood.api.deps import get_tmdb_client
from cinemood.schemas import ERROR_RESPONSES, PagedResults
from cinemood.services.tmdb_client import TMDBClient

logger = logging.getLogger(__name__)
router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/movies")
async def list_movies(
    type: Optional[str] = Query(None, description="popular | top_rated | upcoming | now_playing"),
    page: int = Query(1, ge=1),
    client: TMDBClient = Depends(get_tmdb_client),
) -> Dict[str, Any]:
    """
    Paged movie listing for `type`. Without `type`, returns the home page rows
    (now playing and top rated, first page each).
    """
    if type:
        data = await client.list_movies(type, page)
        return PagedResults.from_tmdb(data).model_dump()

    now_playing, top_rated = await asyncio.gather(
        client.list_movies("now_playing", 1),
        client.list_movies("top_rated", 1),
    )
    return {
        "nowPlaying": now_playing.get("results") or [],
        "topRated": top_rated.get("results") or [],
    }


@router.get("/tv")
async def list_tv(
    type: Optional[str] = Query(None, description="popular | top_rated | on_the_air | airing_today"),
    page: int = Query(1, ge=1),
    client: TMDBClient = Depends(get_tmdb_client),
) -> Dict[str, Any]:
    """Paged TV listing for `type`; an empty result set when no `type` is given."""
    if not type:
        return {"results": []}
    data = await client.list_tv(type, page)
    return PagedResults.from_tmdb(data).model_dump()
