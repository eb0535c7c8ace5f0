"""
mood_match.py - Mood match API endpoint
"""
from fastapi import APIRouter, Depends
import logging

from cinemood.api.deps import get_mood_recommender
from cinemood.core.exceptions import ClientInputError
from cinemood.schemas import ERROR_RESPONSES, MoodMatchRequest, MoodMatchResponse
from cinemood.services.mood_match import MoodRecommender

logger = logging.getLogger(__name__)
router = APIRouter(responses=ERROR_RESPONSES)


@router.post("/mood-match", response_model=MoodMatchResponse)
async def mood_match(
    payload: MoodMatchRequest,
    recommender: MoodRecommender = Depends(get_mood_recommender),
):
    """
    Recommend up to six movies for a free-text mood, with a one-line reason each
    and an overall explanation.
    """
    if not payload.mood.strip():
        raise ClientInputError("Please provide a mood description")

    result = await recommender.recommend(payload.mood)
    logger.info(f"Mood match returned {len(result.movies)} movies")
    return MoodMatchResponse(movies=result.movies, explanation=result.explanation)
