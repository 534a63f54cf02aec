"""Gemini generateContent client.

One POST per call, no retries: "regenerate" is a user action. The API key
is injected at construction so tests can hand in a fake transport without
touching the process environment.
"""

import logging
from typing import NamedTuple

import httpx

from ..config import settings
from ..exceptions import ConfigurationError, EmptyGenerationError, ProviderError, TransportError

logger = logging.getLogger(__name__)

MAX_ERROR_BODY = 2000


class GenerationConfig(NamedTuple):
    temperature: float
    max_output_tokens: int


class GenerationResult(NamedTuple):
    text: str
    tokens_used: int
    finish_reason: str | None = None


class GeminiClient:
    """Thin synchronous client for ``models/{model}:generateContent``."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        api_base: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 45.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY not configured")
        self._api_key = api_key
        self.model = model
        self._url = f"{api_base.rstrip('/')}/models/{model}:generateContent"
        self._http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def generate(self, prompt: str, config: GenerationConfig) -> GenerationResult:
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": config.temperature,
                "maxOutputTokens": config.max_output_tokens,
            },
        }

        try:
            response = self._http.post(self._url, params={"key": self._api_key}, json=payload)
        except httpx.TimeoutException as exc:
            logger.warning("Gemini request timed out (model=%s)", self.model)
            raise TransportError(f"Gemini request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.warning("Gemini transport failure (model=%s): %s", self.model, exc)
            raise TransportError(f"Could not reach Gemini API: {exc}") from exc

        if not response.is_success:
            body = response.text[:MAX_ERROR_BODY]
            logger.error("Gemini API error %d (model=%s): %s", response.status_code, self.model, body[:200])
            raise ProviderError(response.status_code, body)

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError(response.status_code, response.text[:MAX_ERROR_BODY]) from exc

        if not isinstance(data, dict):
            raise ProviderError(response.status_code, response.text[:MAX_ERROR_BODY])
        return _parse_response(data)


def _parse_response(data: dict) -> GenerationResult:
    """Pull generated text and token usage out of the response envelope."""
    candidates = data.get("candidates")
    if not isinstance(candidates, list):
        candidates = []
    candidate = next((c for c in candidates if isinstance(c, dict)), {})
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        parts = []

    # Thinking models may return reasoning parts flagged with "thought"
    text = "".join(str(p.get("text") or "") for p in parts if isinstance(p, dict) and not p.get("thought"))
    finish_reason = candidate.get("finishReason")

    if not text.strip():
        feedback = data.get("promptFeedback")
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        logger.warning(
            "Gemini returned no text (finish_reason=%s, block_reason=%s)",
            finish_reason,
            block_reason,
        )
        raise EmptyGenerationError(
            finish_reason=finish_reason,
            block_reason=block_reason,
            safety_ratings=candidate.get("safetyRatings"),
        )

    usage = data.get("usageMetadata")
    total = usage.get("totalTokenCount") if isinstance(usage, dict) else None
    tokens_used = total if isinstance(total, int) else 0
    return GenerationResult(text=text, tokens_used=tokens_used, finish_reason=finish_reason)


def create_gemini_client() -> GeminiClient:
    """Factory: build the client from settings. Raises ConfigurationError without a key."""
    return GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        api_base=settings.gemini_api_base,
        timeout=settings.gemini_timeout_seconds,
    )
