"""
Async LLM client for generative mood match.

Supports two providers:
- "ollama": POST {api_base}/api/generate with a JSON schema in `format`
- "openai_compatible": POST {api_base}/chat/completions with a json_schema response format

Both return the parsed JSON object produced by the model.
"""
import json
import logging
from typing import Any, Dict, Optional

import httpx

from cinemood.core.exceptions import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

PROVIDERS = ("ollama", "openai_compatible")
SYSTEM_PROMPT = "You are a film curator. Respond with strict JSON only."


class LLMClient:
    """Async client for Ollama or OpenAI-compatible chat APIs."""

    def __init__(
        self,
        provider: str = "ollama",
        api_base: str = "http://ollama:11434",
        model: str = "phi3.5:3.8b-mini-instruct-q4_K_M",
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if provider not in PROVIDERS:
            raise ConfigurationError(f"Unsupported LLM provider: {provider}")
        if not model or not model.strip():
            raise ConfigurationError("LLM model is not configured")
        self.provider = provider
        self.api_base = api_base.rstrip("/")
        self.model = model.strip()
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _request(self, prompt: str, schema: Dict[str, Any]):
        if self.provider == "ollama":
            return "/api/generate", {
                "model": self.model,
                "prompt": f"{SYSTEM_PROMPT}\n\n{prompt}",
                "format": schema,
                "options": {"temperature": 0.7},
                "stream": False,
            }
        return "/chat/completions", {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": 0.7,
            "response_format": {
                "type": "json_schema",
                "json_schema": {"name": "mood_recommendations", "schema": schema},
            },
        }

    def _extract_text(self, body: Dict[str, Any]) -> str:
        if self.provider == "ollama":
            return body.get("response") or ""
        choices = body.get("choices") or []
        if not choices:
            return ""
        return ((choices[0] or {}).get("message") or {}).get("content") or ""

    async def generate_json(self, prompt: str, schema: Dict[str, Any]) -> Dict[str, Any]:
        """Run `prompt` constrained to `schema` and return the decoded JSON object."""
        path, payload = self._request(prompt, schema)
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        async with httpx.AsyncClient(base_url=self.api_base, timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(path, json=payload, headers=headers)
                response.raise_for_status()
                body = response.json()
            except httpx.TimeoutException as e:
                logger.error(f"LLM request timeout for model {self.model}: {e}")
                raise UpstreamError("LLM request timed out", details=str(e), service="llm", operation="generate")
            except httpx.HTTPStatusError as e:
                logger.error(f"LLM HTTP error for model {self.model}: {e.response.status_code}")
                raise UpstreamError(
                    "LLM request failed", details=f"HTTP {e.response.status_code}", service="llm", operation="generate"
                )
            except httpx.HTTPError as e:
                logger.error(f"LLM request failed for model {self.model}: {e}")
                raise UpstreamError("LLM request failed", details=str(e), service="llm", operation="generate")
            except ValueError as e:
                logger.error(f"LLM returned a non-JSON body for model {self.model}")
                raise UpstreamError("Invalid response from LLM", details=str(e), service="llm", operation="generate")

        text = self._extract_text(body if isinstance(body, dict) else {})
        try:
            result = json.loads(text)
        except ValueError:
            logger.warning(f"Could not parse JSON from LLM output. Raw: {text[:500]}")
            raise UpstreamError("Invalid response from LLM", details="Model output was not valid JSON", service="llm", operation="generate")
        if not isinstance(result, dict):
            raise UpstreamError("Invalid response from LLM", details="Model output was not a JSON object", service="llm", operation="generate")
        return result
