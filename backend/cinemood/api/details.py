"""
details.py - Movie and TV detail endpoints.

Detail, videos and cast are fetched concurrently. The detail call is required;
videos and cast degrade to empty lists when their upstream call fails.
"""
from fastapi import APIRouter, Depends
from typing import Any, Dict, List
import asyncio
import logging

from cinemood.api.deps import get_tmdb_client
from cinemood.core.exceptions import UpstreamError
from cinemood.schemas import ERROR_RESPONSES
from cinemood.services.tmdb_client import TMDBClient

logger = logging.getLogger(__name__)
router = APIRouter(responses=ERROR_RESPONSES)

MAX_CAST = 10


async def _optional_list(coro, label: str) -> List[Dict[str, Any]]:
    try:
        return await coro
    except UpstreamError as e:
        logger.warning(f"{label} unavailable: {e.details or e.message}")
        return []


async def _fetch_details(client: TMDBClient, media_type: str, media_id: int) -> Dict[str, Any]:
    details, videos, cast = await asyncio.gather(
        client.get_details(media_type, media_id),
        _optional_list(client.get_videos(media_type, media_id), f"Videos for {media_type}/{media_id}"),
        _optional_list(client.get_credits(media_type, media_id), f"Cast for {media_type}/{media_id}"),
    )
    logger.info(f"Fetched {media_type}/{media_id} details (videos={len(videos)}, cast={len(cast)})")
    return {"details": details, "videos": videos, "cast": cast[:MAX_CAST]}


@router.get("/movie/{movie_id}")
async def movie_details(movie_id: int, client: TMDBClient = Depends(get_tmdb_client)) -> Dict[str, Any]:
    data = await _fetch_details(client, "movie", movie_id)
    return {"movie": data["details"], "videos": data["videos"], "cast": data["cast"]}


@router.get("/tv/{show_id}")
async def tv_details(show_id: int, client: TMDBClient = Depends(get_tmdb_client)) -> Dict[str, Any]:
    data = await _fetch_details(client, "tv", show_id)
    return {"show": data["details"], "videos": data["videos"], "cast": data["cast"]}
