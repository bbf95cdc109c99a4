"""
OpenRouter LLM Client

Provides schema-constrained chat completions through OpenRouter's
OpenAI-compatible API.
Default model: openai/gpt-4o-mini

Uses a shared, pooled HTTP client so the concurrent analysis calls reuse
connections.
"""

import httpx
import json
import logging
from typing import Any, Optional

from src.config import get_settings
from src.exceptions import LLMProviderError, LLMResponseParseError

logger = logging.getLogger(__name__)

# Shared HTTP client for connection pooling across all instances
_shared_client: Optional[httpx.AsyncClient] = None


async def get_shared_client() -> httpx.AsyncClient:
    """Get or create the shared HTTP client with connection pooling."""
    global _shared_client
    if _shared_client is None or _shared_client.is_closed:
        settings = get_settings()
        _shared_client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.llm_timeout_seconds, connect=10.0),
            limits=httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20,
                keepalive_expiry=30.0,
            ),
            http2=True,  # HTTP/2 for multiplexing
        )
    return _shared_client


async def close_shared_client():
    """Close the shared client (call on app shutdown)."""
    global _shared_client
    if _shared_client is not None and not _shared_client.is_closed:
        await _shared_client.aclose()
        _shared_client = None


def _provider_message(response: httpx.Response) -> str:
    """Pull the provider's error message out of an error response, if any."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str):
        return error
    return response.reason_phrase


class OpenRouterClient:
    """Client for OpenRouter chat completions with connection pooling."""

    def __init__(
        self,
        model: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = get_settings()
        self.model = model or self.settings.openrouter_model
        self.base_url = self.settings.openrouter_base_url.rstrip("/")
        self._http_client = http_client
        self.headers = {
            "Authorization": f"Bearer {self.settings.openrouter_api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": "https://pillar-ot-copilot.local",
            "X-Title": self.settings.app_name,
        }

    async def _client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return await get_shared_client()

    async def complete(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[dict] = None,
    ) -> dict:
        """
        Generate a completion from OpenRouter.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Override default model
            temperature: Sampling temperature (defaults to settings)
            max_tokens: Maximum tokens in response (defaults to settings)
            response_format: Optional format specification

        Returns:
            Full API response dict

        Raises:
            LLMProviderError: On network failure or a non-2xx response
        """
        payload = {
            "model": model or self.model,
            "messages": messages,
            "temperature": self.settings.llm_temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.settings.llm_max_tokens,
        }

        if response_format:
            payload["response_format"] = response_format

        client = await self._client()
        try:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers=self.headers,
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _provider_message(e.response)
            logger.error(f"OpenRouter returned {e.response.status_code}: {message}")
            raise LLMProviderError(
                f"LLM provider error ({e.response.status_code}): {message}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"OpenRouter request failed: {e!r}")
            raise LLMProviderError(f"LLM provider request failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise LLMProviderError("LLM provider returned a non-JSON envelope") from e

    async def complete_json_schema(
        self,
        system_prompt: str,
        user_payload: Any,
        schema_name: str,
        schema: dict[str, Any],
        model: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Run one schema-constrained completion and return the decoded object.

        The user payload is serialized to JSON text and sent after the system
        prompt. The provider is asked to enforce ``schema``; no further shape
        validation happens here. Empty or missing content decodes as ``{}``.

        Raises:
            LLMProviderError: Provider/network failure or a reply without choices
            LLMResponseParseError: Content present but not valid JSON
        """
        if not system_prompt or not system_prompt.strip():
            raise ValueError("system_prompt must not be empty")

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": json.dumps(user_payload)},
        ]
        response_format = {
            "type": "json_schema",
            "json_schema": {"name": schema_name, "schema": schema},
        }

        result = await self.complete(
            messages=messages,
            model=model,
            response_format=response_format,
        )

        choices = result.get("choices") or []
        if not choices:
            raise LLMProviderError(f"LLM provider returned no choices for '{schema_name}'")

        content = (choices[0].get("message") or {}).get("content") or "{}"
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"JSON decode error for '{schema_name}': {e}")
            raise LLMResponseParseError(
                f"Failed to parse LLM response for '{schema_name}' as JSON: {e}"
            ) from e

    async def health_check(self) -> bool:
        """Check if the OpenRouter API is accessible."""
        try:
            client = await self._client()
            response = await client.get(
                f"{self.base_url}/models",
                headers=self.headers,
            )
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"OpenRouter health check failed: {e}")
            return False
