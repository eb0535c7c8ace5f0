"""
Candidate fetching for mood match.

Genre mode fans out two discover queries (best rated, most popular) and
concatenates them rating pool first. Title mode looks up each title
concurrently and keeps the top search hit. A failing sub-query is logged and
contributes nothing, as long as at least one sub-query succeeds; when all of
them fail the last UpstreamError is raised.
"""
import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

from cinemood.core.exceptions import UpstreamError
from cinemood.schemas import CandidateItem
from cinemood.services.tmdb_client import TMDBClient

logger = logging.getLogger(__name__)


def _parse_results(payload) -> List[CandidateItem]:
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        return []
    candidates = []
    for raw in results:
        item = CandidateItem.from_tmdb(raw)
        if item is not None:
            candidates.append(item)
    return candidates


class CandidateFetcher:
    def __init__(self, client: TMDBClient, rated_min_votes: int = 1000, popular_min_votes: int = 500):
        self.client = client
        self.rated_min_votes = rated_min_votes
        self.popular_min_votes = popular_min_votes

    async def _discover_pool(
        self, genre_ids: Sequence[int], sort_by: str, min_votes: int
    ) -> Tuple[List[CandidateItem], Optional[UpstreamError]]:
        try:
            payload = await self.client.discover_movies(genre_ids, sort_by=sort_by, min_vote_count=min_votes)
        except UpstreamError as e:
            logger.warning(f"Discover pool {sort_by} for genres {list(genre_ids)} failed: {e.details or e.message}")
            return [], e
        return _parse_results(payload), None

    async def fetch_by_genres(self, genre_ids: Sequence[int]) -> List[CandidateItem]:
        """Rating-sorted pool followed by popularity-sorted pool, duplicates left in.

        Raises UpstreamError when both discover queries fail.
        """
        (rated, rated_error), (popular, popular_error) = await asyncio.gather(
            self._discover_pool(genre_ids, "vote_average.desc", self.rated_min_votes),
            self._discover_pool(genre_ids, "popularity.desc", self.popular_min_votes),
        )
        if rated_error and popular_error:
            logger.error(f"Both discover pools failed for genres {list(genre_ids)}")
            raise popular_error
        logger.info(f"Fetched {len(rated)} rated + {len(popular)} popular candidates for genres {list(genre_ids)}")
        return rated + popular

    async def _lookup_title(self, title: str) -> Tuple[Optional[CandidateItem], Optional[UpstreamError]]:
        try:
            payload = await self.client.search_movies(title)
        except UpstreamError as e:
            logger.warning(f"Title lookup for '{title}' failed: {e.details or e.message}")
            return None, e
        matches = _parse_results(payload)
        return (matches[0] if matches else None), None

    async def lookup_titles(self, titles: Sequence[str]) -> List[Optional[CandidateItem]]:
        """One search per title, aligned with `titles`; None where nothing matched.

        Raises UpstreamError when every lookup failed. Titles with no search hit
        are not failures.
        """
        outcomes = await asyncio.gather(*(self._lookup_title(title) for title in titles))
        errors = [error for _, error in outcomes if error is not None]
        if titles and len(errors) == len(titles):
            logger.error(f"All {len(titles)} title lookups failed")
            raise errors[-1]
        return [item for item, _ in outcomes]

    async def fetch_by_titles(self, titles: Sequence[str]) -> List[CandidateItem]:
        return [item for item in await self.lookup_titles(titles) if item is not None]
