"""
Text generation client: the single boundary to the language model.
"""
import logging
from typing import Optional, Protocol

import httpx

from core.config import (
    OLLAMA_BASE_URL,
    OLLAMA_MODEL,
    LLM_TEMPERATURE,
    LLM_MAX_TOKENS,
    LLM_CALL_TIMEOUT,
)
from core.errors import (
    GenerationError,
    MalformedResponseError,
    NetworkError,
    classify_http_status,
)

logger = logging.getLogger(__name__)


class TextGenerationClient(Protocol):
    """Anything that can turn a prompt into best-effort text."""

    def generate(self, prompt: str) -> str:
        ...


class OllamaClient:
    """Client for an Ollama-compatible /api/generate endpoint."""

    def __init__(
        self,
        base_url: str = OLLAMA_BASE_URL,
        model: str = OLLAMA_MODEL,
        temperature: float = LLM_TEMPERATURE,
        max_tokens: int = LLM_MAX_TOKENS,
        timeout: float = LLM_CALL_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = http_client or httpx.Client(
            timeout=httpx.Timeout(timeout, connect=min(timeout, 30.0))
        )

    def generate(self, prompt: str) -> str:
        """Submit a prompt and return the completion text."""
        url = f"{self.base_url}/api/generate"
        payload = {
            "model": self.model,
            "prompt": prompt,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
            },
            "stream": False,
        }

        try:
            response = self.client.post(url, json=payload)
        except httpx.TimeoutException as e:
            raise NetworkError(f"Text generation request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Text generation request failed: {e}") from e

        if response.status_code >= 400:
            raise classify_http_status(response.status_code, response.text)

        try:
            result = response.json()
        except ValueError as e:
            raise MalformedResponseError("Text generation service returned non-JSON body") from e

        if not isinstance(result, dict):
            raise MalformedResponseError("Text generation service returned unexpected payload")
        if "error" in result and not result.get("response"):
            raise GenerationError(f"Text generation service error: {result['error']}")

        text = result.get("response", "")
        logger.debug("LLM reply (%d chars) from %s", len(text), self.model)
        return text

    def close(self) -> None:
        self.client.close()
