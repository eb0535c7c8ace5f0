"""
ranker.py

Merges candidate pools into the final mood match list. Order of first
appearance is kept (earlier pools rank higher), duplicates are dropped by TMDB
id and each item gets a template-based reason. No LLMs are used here.
"""
from typing import Iterable, List, Sequence, Tuple

from cinemood.schemas import CandidateItem, RankedRecommendation
from cinemood.services.genres import genre_name

DEFAULT_REASON = "A highly-rated film that matches your vibe."
GENRE_REASON = "This {genre} gem fits perfectly with what you're looking for."
ACCLAIMED_REASON = "A critically acclaimed masterpiece that's perfect for your current mood."


def dedupe_by_id(items: Iterable, key=lambda item: item.id) -> list:
    """Stable de-duplication keeping the first occurrence of each key."""
    seen = set()
    unique = []
    for item in items:
        item_key = key(item)
        if item_key in seen:
            continue
        seen.add(item_key)
        unique.append(item)
    return unique


def explain_candidate(candidate: CandidateItem, genre_ids: Sequence[int], acclaimed_threshold: float = 8.0) -> str:
    requested = set(genre_ids)
    reason = DEFAULT_REASON
    matched = [genre_name(g) for g in candidate.genre_ids if g in requested]
    matched = [name for name in matched if name]
    if matched:
        reason = GENRE_REASON.format(genre=matched[0].lower())
    # Quality beats genre overlap
    if candidate.vote_average >= acclaimed_threshold:
        reason = ACCLAIMED_REASON
    return reason


def rank(
    candidates: Sequence[CandidateItem],
    genre_ids: Sequence[int],
    max_results: int = 6,
    acclaimed_threshold: float = 8.0,
) -> List[RankedRecommendation]:
    unique = dedupe_by_id(candidates)[:max_results]
    return [
        RankedRecommendation.from_candidate(c, explain_candidate(c, genre_ids, acclaimed_threshold))
        for c in unique
    ]


def rank_with_reasons(pairs: Sequence[Tuple[CandidateItem, str]], max_results: int = 6) -> List[RankedRecommendation]:
    """Like rank(), but reasons come from the caller (generative mode) and pass through untouched."""
    unique = dedupe_by_id(pairs, key=lambda pair: pair[0].id)[:max_results]
    return [RankedRecommendation.from_candidate(c, reason) for c, reason in unique]
