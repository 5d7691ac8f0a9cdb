"""Anthropic Claude API client wrapper."""

import logging
from typing import Optional

from anthropic import Anthropic, APIError, APIConnectionError, APIStatusError, APITimeoutError

from ..config import config
from ..errors import GenerationError

logger = logging.getLogger(__name__)


class AnthropicClient:
    """Client wrapper for the Anthropic Claude API.

    SDK retries are disabled: a failed request is reported once as
    `GenerationError`.
    """

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the Anthropic client.

        Args:
            api_key: Anthropic API key supplied by the user.
            model: Model to use. Defaults to config.anthropic_model.
            timeout: Request timeout in seconds. Defaults to config.request_timeout.
        """
        if not api_key:
            raise GenerationError("API key not provided. Save one with 'script-maker set-key'.")

        self._timeout = timeout or config.request_timeout
        self._client = Anthropic(api_key=api_key, timeout=self._timeout, max_retries=0)
        self._model = model or config.anthropic_model

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    def create_message(
        self,
        prompt: str,
        max_tokens: int = 4096,
        system: Optional[str] = None,
        temperature: float = 0.7,
    ) -> str:
        """Create a message using Claude.

        Args:
            prompt: The user prompt to send.
            max_tokens: Maximum tokens in the response.
            system: Optional system prompt.
            temperature: Sampling temperature (0.0-1.0).

        Returns:
            The text content of Claude's response.

        Raises:
            GenerationError: If the request fails or the response has no text.
        """
        kwargs = {
            "model": self._model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
        }
        if system:
            kwargs["system"] = system

        logger.debug(f"Sending request to Claude (prompt length: {len(prompt)})")

        try:
            response = self._client.messages.create(**kwargs)
        except APITimeoutError as e:
            logger.error(f"Claude request timed out after {self._timeout}s")
            raise GenerationError(f"Request timed out after {self._timeout:.0f}s") from e
        except APIConnectionError as e:
            logger.error(f"Connection error: {e}")
            raise GenerationError("Could not reach the generation service") from e
        except APIStatusError as e:
            logger.error(f"API error: {e.status_code}")
            raise GenerationError(
                f"Generation service returned {e.status_code}", status_code=e.status_code
            ) from e
        except APIError as e:
            logger.error(f"API error: {e}")
            raise GenerationError(f"Generation failed: {e}") from e

        # Extract text content from response
        if not response.content:
            raise GenerationError("Generation service returned an empty response")
        content = response.content[0]
        if not hasattr(content, "text"):
            raise GenerationError("Generation service returned an unexpected response")
        return content.text
