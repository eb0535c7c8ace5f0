"""
TMDB client for CineMood.
- Async httpx client; API key comes from settings (TMDB_API_KEY).
- A missing key is a configuration error raised before any request is made.
- Transient failures (timeouts, 429, 5xx) are retried with exponential backoff.
- No in-module caching; every call is a fresh upstream request.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from cinemood.core.config import settings
from cinemood.core.exceptions import ConfigurationError, UpstreamError
from cinemood.services.rate_limit import with_backoff

logger = logging.getLogger(__name__)

MOVIE_LIST_CATEGORIES = {
    "popular": "movie/popular",
    "top_rated": "movie/top_rated",
    "upcoming": "movie/upcoming",
    "now_playing": "movie/now_playing",
}

TV_LIST_CATEGORIES = {
    "popular": "tv/popular",
    "top_rated": "tv/top_rated",
    "on_the_air": "tv/on_the_air",
    "airing_today": "tv/airing_today",
}

MEDIA_TYPES = ("movie", "tv")


class TMDBClient:
    """Thin async wrapper over the TMDB v3 REST API."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.themoviedb.org/3",
        language: str = "en-US",
        timeout: float = 10.0,
        max_retries: int = 3,
        backoff_seconds: float = 0.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ConfigurationError("TMDB_API_KEY not configured")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.language = language
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "TMDBClient":
        return cls(
            api_key=settings.tmdb_api_key,
            base_url=settings.tmdb_base_url,
            language=settings.tmdb_language,
            timeout=settings.tmdb_timeout_seconds,
            max_retries=settings.tmdb_max_retries,
            backoff_seconds=settings.tmdb_backoff_seconds,
            transport=transport,
        )

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None, operation: str = "get") -> Dict[str, Any]:
        url = f"{self.base_url}/{path.lstrip('/')}"
        query = {"api_key": self.api_key, "language": self.language}
        query.update(params or {})

        async def make_request():
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(url, params=query)
                resp.raise_for_status()
                return resp

        try:
            resp = await with_backoff(
                make_request,
                max_retries=self.max_retries,
                base_delay=self.backoff_seconds,
                service="tmdb_api",
            )
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"TMDB {operation} failed for /{path} with HTTP {status}")
            raise UpstreamError(
                "Failed to fetch from TMDB", details=f"HTTP {status} from /{path}", operation=operation
            )
        except httpx.HTTPError as e:
            # str(e) never includes the query string, so the key stays out of logs
            logger.error(f"TMDB {operation} failed for /{path}: {type(e).__name__}: {e}")
            raise UpstreamError(
                "Failed to fetch from TMDB", details=f"{type(e).__name__} calling /{path}", operation=operation
            )

        try:
            data = resp.json()
        except ValueError:
            logger.error(f"TMDB {operation} returned non-JSON body for /{path} (status={resp.status_code})")
            raise UpstreamError("Invalid response from TMDB", details=f"Non-JSON body from /{path}", operation=operation)

        if not isinstance(data, dict):
            raise UpstreamError("Invalid response from TMDB", details=f"Unexpected payload from /{path}", operation=operation)
        if data.get("success") is False:
            message = data.get("status_message") or "TMDB API error"
            logger.error(f"TMDB {operation} error envelope for /{path}: {message}")
            raise UpstreamError("TMDB API error", details=message, operation=operation)
        return data

    async def discover_movies(
        self,
        genre_ids: Sequence[int],
        sort_by: str = "popularity.desc",
        min_vote_count: int = 0,
        page: int = 1,
    ) -> Dict[str, Any]:
        """Discover movies tagged with every id in `genre_ids` (TMDB treats commas as AND)."""
        params = {
            "with_genres": ",".join(str(g) for g in genre_ids),
            "sort_by": sort_by,
            "vote_count.gte": min_vote_count,
            "include_adult": False,
            "page": page,
        }
        return await self._get("discover/movie", params, operation="discover_movies")

    async def search_movies(self, query: str, page: int = 1) -> Dict[str, Any]:
        params = {"query": query, "page": page, "include_adult": False}
        return await self._get("search/movie", params, operation="search_movies")

    async def list_movies(self, category: str, page: int = 1) -> Dict[str, Any]:
        """Curated movie lists; unknown categories fall back to popular."""
        path = MOVIE_LIST_CATEGORIES.get(category, MOVIE_LIST_CATEGORIES["popular"])
        return await self._get(path, {"page": page}, operation="list_movies")

    async def list_tv(self, category: str, page: int = 1) -> Dict[str, Any]:
        """Curated TV lists; unknown categories fall back to popular."""
        path = TV_LIST_CATEGORIES.get(category, TV_LIST_CATEGORIES["popular"])
        return await self._get(path, {"page": page}, operation="list_tv")

    async def get_details(self, media_type: str, media_id: int) -> Dict[str, Any]:
        _check_media_type(media_type)
        return await self._get(f"{media_type}/{media_id}", operation=f"{media_type}_details")

    async def get_videos(self, media_type: str, media_id: int) -> List[Dict[str, Any]]:
        _check_media_type(media_type)
        data = await self._get(f"{media_type}/{media_id}/videos", operation=f"{media_type}_videos")
        results = data.get("results")
        return results if isinstance(results, list) else []

    async def get_credits(self, media_type: str, media_id: int) -> List[Dict[str, Any]]:
        """Cast list; TV uses aggregate credits so long-running shows list every season's cast."""
        _check_media_type(media_type)
        path = f"tv/{media_id}/aggregate_credits" if media_type == "tv" else f"movie/{media_id}/credits"
        data = await self._get(path, operation=f"{media_type}_credits")
        cast = data.get("cast")
        return cast if isinstance(cast, list) else []


def _check_media_type(media_type: str) -> None:
    if media_type not in MEDIA_TYPES:
        raise ValueError(f"Unsupported media type: {media_type}")
