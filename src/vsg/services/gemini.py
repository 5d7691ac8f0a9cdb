"""Gemini generateContent REST client."""

import logging
from typing import Optional

import requests

from ..config import config
from ..errors import GenerationError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Client for the Gemini text generation endpoint.

    One call is one HTTPS POST. Requests time out after ``timeout`` seconds
    and are never retried; every failure surfaces as `GenerationError`.
    """

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: Gemini API key supplied by the user.
            model: Model to use. Defaults to config.gemini_model.
            base_url: Endpoint base URL. Defaults to config.gemini_base_url.
            timeout: Request timeout in seconds. Defaults to config.request_timeout.
            session: Optional requests session to send through.
        """
        if not api_key:
            raise GenerationError("API key not provided. Save one with 'script-maker set-key'.")

        self._api_key = api_key
        self._model = model or config.gemini_model
        self._base_url = (base_url or config.gemini_base_url).rstrip("/")
        self._timeout = timeout or config.request_timeout
        self._session = session

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    @property
    def url(self) -> str:
        return f"{self._base_url}/{self._model}:generateContent"

    def create_message(
        self,
        prompt: str,
        max_tokens: int = 4096,
        system: Optional[str] = None,
        temperature: float = 0.7,
    ) -> str:
        """Generate a completion for a single prompt.

        Args:
            prompt: The user prompt to send.
            max_tokens: Maximum tokens in the response.
            system: Optional system instruction.
            temperature: Sampling temperature.

        Returns:
            The completion text.

        Raises:
            GenerationError: On network failure, timeout, a non-2xx status or
                a response without completion text.
        """
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": max_tokens,
                "temperature": temperature,
            },
        }
        if system:
            body["systemInstruction"] = {"parts": [{"text": system}]}

        # The key goes in a header so it never appears in URLs or logs
        headers = {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }

        post = self._session.post if self._session is not None else requests.post
        logger.debug(f"Sending request to {self.url} (prompt length: {len(prompt)})")

        try:
            response = post(self.url, json=body, headers=headers, timeout=self._timeout)
        except requests.Timeout as e:
            logger.error(f"Gemini request timed out after {self._timeout}s")
            raise GenerationError(f"Request timed out after {self._timeout:.0f}s") from e
        except requests.RequestException as e:
            logger.error(f"Gemini request failed: {e.__class__.__name__}")
            raise GenerationError(f"Could not reach the generation service: {e.__class__.__name__}") from e

        if not response.ok:
            logger.error(f"Gemini API error: {response.status_code}")
            raise GenerationError(
                f"Generation service returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected Gemini response structure: {e!r}")
            raise GenerationError("Generation service returned an unexpected response") from e

        if not isinstance(text, str):
            raise GenerationError("Generation service returned an unexpected response")

        logger.debug(f"Received response of length: {len(text)}")
        return text
