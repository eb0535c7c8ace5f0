"""
deps.py - FastAPI dependencies shared by the routers.
Tests swap these out through app.dependency_overrides.
"""
from fastapi import Depends

from cinemood.core.config import settings
from cinemood.services.mood_match import MoodRecommender, build_recommender
from cinemood.services.tmdb_client import TMDBClient


def get_tmdb_client() -> TMDBClient:
    """Raises ConfigurationError (500) when TMDB_API_KEY is unset, before any request is made."""
    return TMDBClient.from_settings()


def get_mood_recommender(client: TMDBClient = Depends(get_tmdb_client)) -> MoodRecommender:
    return build_recommender(client, settings)
