"""
mood_match.py

Mood match strategies behind one interface:
- HeuristicMoodRecommender: lexicon analysis -> genre discover -> template reasons
- GenerativeMoodRecommender: LLM picks titles and reasons -> TMDB title lookup
"""
import logging
from dataclasses import dataclass
from typing import List

from pydantic import ValidationError

from cinemood.core.config import Settings, settings
from cinemood.core.exceptions import ConfigurationError, UpstreamError
from cinemood.schemas import GeneratedRecommendations, RankedRecommendation
from cinemood.services.candidates import CandidateFetcher
from cinemood.services.llm_client import LLMClient
from cinemood.services.mood import MoodAnalyzer
from cinemood.services.ranker import rank, rank_with_reasons
from cinemood.services.tmdb_client import TMDBClient

logger = logging.getLogger(__name__)


@dataclass
class MoodMatchResult:
    movies: List[RankedRecommendation]
    explanation: str


class MoodRecommender:
    async def recommend(self, mood_text: str) -> MoodMatchResult:
        raise NotImplementedError


class HeuristicMoodRecommender(MoodRecommender):
    def __init__(
        self,
        fetcher: CandidateFetcher,
        analyzer: MoodAnalyzer = None,
        max_results: int = 6,
        acclaimed_threshold: float = 8.0,
    ):
        self.fetcher = fetcher
        self.analyzer = analyzer or MoodAnalyzer()
        self.max_results = max_results
        self.acclaimed_threshold = acclaimed_threshold

    async def recommend(self, mood_text: str) -> MoodMatchResult:
        analysis = self.analyzer.analyze(mood_text)
        logger.info(f"Mood '{mood_text[:80]}' -> genres {list(analysis.genre_ids)} (keywords: {list(analysis.matched_keywords)})")
        candidates = await self.fetcher.fetch_by_genres(analysis.genre_ids)
        movies = rank(candidates, analysis.genre_ids, self.max_results, self.acclaimed_threshold)
        return MoodMatchResult(movies=movies, explanation=analysis.explanation)


PROMPT_TEMPLATE = (
    "Someone describes how they feel and what they want to watch:\n"
    "\"{mood}\"\n\n"
    "Recommend between 4 and 6 real, released feature films that fit this mood. "
    "For each film give its exact English title and one sentence explaining why it suits the mood. "
    "Also write a short, friendly explanation (1-2 sentences) of the overall selection."
)


class GenerativeMoodRecommender(MoodRecommender):
    def __init__(self, llm: LLMClient, fetcher: CandidateFetcher, max_results: int = 6):
        self.llm = llm
        self.fetcher = fetcher
        self.max_results = max_results

    async def recommend(self, mood_text: str) -> MoodMatchResult:
        raw = await self.llm.generate_json(
            PROMPT_TEMPLATE.format(mood=mood_text.strip()),
            GeneratedRecommendations.model_json_schema(),
        )
        try:
            generated = GeneratedRecommendations.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"LLM output failed validation: {e.error_count()} errors")
            raise UpstreamError(
                "Invalid response from LLM", details="Output did not match the recommendation schema", service="llm"
            )

        titles = [pick.title for pick in generated.picks]
        found = await self.fetcher.lookup_titles(titles)
        pairs = [(item, pick.reason) for item, pick in zip(found, generated.picks) if item is not None]
        logger.info(f"Generative mood match resolved {len(pairs)}/{len(titles)} suggested titles")
        return MoodMatchResult(
            movies=rank_with_reasons(pairs, self.max_results),
            explanation=generated.explanation,
        )


def build_recommender(client: TMDBClient, config: Settings = settings) -> MoodRecommender:
    """Pick the mood match strategy configured by MOOD_MATCH_STRATEGY."""
    fetcher = CandidateFetcher(
        client,
        rated_min_votes=config.mood_rated_min_votes,
        popular_min_votes=config.mood_popular_min_votes,
    )
    strategy = config.mood_match_strategy.lower()
    if strategy == "heuristic":
        return HeuristicMoodRecommender(
            fetcher,
            max_results=config.mood_match_max_results,
            acclaimed_threshold=config.mood_acclaimed_threshold,
        )
    if strategy == "generative":
        llm = LLMClient(
            provider=config.llm_provider,
            api_base=config.llm_api_base,
            model=config.llm_model,
            api_key=config.llm_api_key,
            timeout=config.llm_timeout_seconds,
        )
        return GenerativeMoodRecommender(llm, fetcher, max_results=config.mood_match_max_results)
    raise ConfigurationError(f"Unknown mood match strategy: {config.mood_match_strategy}")
