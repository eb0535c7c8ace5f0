"""Canned TMDB / LLM transports for unit tests (no network)."""
import json

import httpx

from cinemood.services.tmdb_client import TMDBClient

TMDB_PREFIX = "/3/"


def movie(movie_id, title=None, vote_average=7.0, genre_ids=(18,), **extra):
    payload = {
        "id": movie_id,
        "title": title or f"Movie {movie_id}",
        "overview": f"Overview {movie_id}",
        "poster_path": f"/poster{movie_id}.jpg",
        "vote_average": vote_average,
        "release_date": "2001-01-01",
        "genre_ids": list(genre_ids),
    }
    payload.update(extra)
    return payload


def page(results, page_no=1, total_pages=1, total_results=None):
    return {
        "page": page_no,
        "results": list(results),
        "total_pages": total_pages,
        "total_results": len(results) if total_results is None else total_results,
    }


class FakeTMDB:
    """Routes TMDB paths (without the /3/ prefix) to canned replies and records requests.

    A route value may be a dict (200 JSON), a (status, body) tuple, or a callable
    taking the request and returning an httpx.Response.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(TMDB_PREFIX):
            path = path[len(TMDB_PREFIX):]
        route = self.routes.get(path)
        if route is None:
            return httpx.Response(404, json={"success": False, "status_code": 34, "status_message": "Not found"})
        if callable(route):
            return route(request)
        if isinstance(route, tuple):
            status, body = route
            if isinstance(body, (dict, list)):
                return httpx.Response(status, json=body)
            return httpx.Response(status, text=body)
        return httpx.Response(200, json=route)

    def paths(self):
        return [r.url.path[len(TMDB_PREFIX):] for r in self.requests]

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    def client(self, **kwargs) -> TMDBClient:
        kwargs.setdefault("backoff_seconds", 0)
        kwargs.setdefault("max_retries", 1)
        return TMDBClient("test-key", transport=self.transport, **kwargs)


def ollama_transport(output, recorder=None):
    """Ollama /api/generate stub returning `output` (dict or raw text) as the model response."""
    text = output if isinstance(output, str) else json.dumps(output)

    def handler(request: httpx.Request) -> httpx.Response:
        if recorder is not None:
            recorder.append(request)
        return httpx.Response(200, json={"model": "test", "response": text, "done": True})

    return httpx.MockTransport(handler)
