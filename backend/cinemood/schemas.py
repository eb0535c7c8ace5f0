"""
schemas.py

Pydantic schemas for TMDB candidates, mood match payloads and paged listings.
"""
from pydantic import BaseModel, Field, StrictStr, field_validator
from typing import Any, Dict, List, Optional, Union


class CandidateItem(BaseModel):
    id: int
    title: str = ""
    overview: str = ""
    poster_path: Optional[str] = None
    vote_average: float = 0.0
    release_date: str = ""
    genre_ids: List[int] = Field(default_factory=list)

    @field_validator("vote_average")
    @classmethod
    def clamp_vote_average(cls, v):
        return min(max(v, 0.0), 10.0)

    @classmethod
    def from_tmdb(cls, payload: Any) -> Optional["CandidateItem"]:
        """Build a candidate from a raw TMDB result, tolerating missing or odd fields.

        Returns None when the payload has no usable integer id.
        """
        if not isinstance(payload, dict):
            return None
        raw_id = payload.get("id")
        if isinstance(raw_id, bool) or not isinstance(raw_id, int):
            return None

        try:
            vote_average = float(payload.get("vote_average") or 0.0)
        except (TypeError, ValueError):
            vote_average = 0.0

        genre_ids = payload.get("genre_ids")
        if not isinstance(genre_ids, list):
            # Detail payloads carry full genre objects instead of ids
            genres = payload.get("genres") if isinstance(payload.get("genres"), list) else []
            genre_ids = [g.get("id") for g in genres if isinstance(g, dict)]

        poster_path = payload.get("poster_path")
        return cls(
            id=raw_id,
            title=str(payload.get("title") or payload.get("name") or ""),
            overview=str(payload.get("overview") or ""),
            poster_path=poster_path if isinstance(poster_path, str) and poster_path else None,
            vote_average=vote_average,
            release_date=str(payload.get("release_date") or payload.get("first_air_date") or ""),
            genre_ids=[g for g in genre_ids if isinstance(g, int) and not isinstance(g, bool)],
        )


class RankedRecommendation(BaseModel):
    id: int
    title: str
    overview: str
    poster_path: Optional[str] = None
    vote_average: float
    release_date: str
    reason: str

    @classmethod
    def from_candidate(cls, candidate: CandidateItem, reason: str) -> "RankedRecommendation":
        return cls(
            id=candidate.id,
            title=candidate.title,
            overview=candidate.overview,
            poster_path=candidate.poster_path,
            vote_average=candidate.vote_average,
            release_date=candidate.release_date,
            reason=reason,
        )


# Payloads
class MoodMatchRequest(BaseModel):
    mood: StrictStr


class MoodMatchResponse(BaseModel):
    movies: List[RankedRecommendation]
    explanation: str


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


class PagedResults(BaseModel):
    results: List[Dict[str, Any]]
    total_pages: int = 1
    current_page: int = 1
    total_results: int = 0

    @classmethod
    def from_tmdb(cls, payload: Dict[str, Any], page: Optional[int] = None) -> "PagedResults":
        results = payload.get("results")
        return cls(
            results=[r for r in results if isinstance(r, dict)] if isinstance(results, list) else [],
            total_pages=_as_int(payload.get("total_pages"), 1),
            current_page=page if page is not None else _as_int(payload.get("page"), 1),
            total_results=_as_int(payload.get("total_results"), 0),
        )


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


ERROR_RESPONSES: Dict[Union[int, str], Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    500: {"model": ErrorResponse, "description": "Configuration or upstream failure"},
}


# LLM output contract for generative mood match
class GeneratedPick(BaseModel):
    title: str = Field(..., min_length=1)
    reason: str


class GeneratedRecommendations(BaseModel):
    picks: List[GeneratedPick] = Field(..., min_length=4, max_length=6)
    explanation: str
