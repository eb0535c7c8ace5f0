from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict



class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # TMDB upstream; key is checked per request, not at startup
    tmdb_api_key: Optional[str] = None
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_language: str = "en-US"
    tmdb_timeout_seconds: float = 10.0
    tmdb_max_retries: int = 3
    tmdb_backoff_seconds: float = 0.5

    # Mood match: heuristic | generative
    mood_match_strategy: str = "heuristic"
    mood_match_max_results: int = 6
    mood_rated_min_votes: int = 1000
    mood_popular_min_votes: int = 500
    mood_acclaimed_threshold: float = 8.0

    # LLM provider for generative mood match
    # Provider options: "ollama", "openai_compatible" (can be local)
    llm_provider: str = "ollama"
    llm_api_base: str = "http://ollama:11434"
    llm_api_key: Optional[str] = None
    llm_model: str = "phi3.5:3.8b-mini-instruct-q4_K_M"
    llm_timeout_seconds: float = 30.0

    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

settings = Settings()
