"""
exceptions.py

Error taxonomy shared by services and the HTTP layer. Each error knows the
status code it is surfaced with; handlers in main.py render them as
{"error": ..., "details": ...}.
"""
from typing import Any, Dict, Optional


class CineMoodError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ClientInputError(CineMoodError):
    """Missing or invalid request fields."""
    status_code = 400


class ConfigurationError(CineMoodError):
    """A required upstream credential or setting is missing."""
    status_code = 500


class UpstreamError(CineMoodError):
    """Network, HTTP or parse failure talking to TMDB or the LLM provider."""
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None, service: str = "tmdb", operation: Optional[str] = None):
        super().__init__(message, details)
        self.service = service
        self.operation = operation
