"""External generation service integrations."""

from typing import Optional, Union

from ..config import config
from ..errors import GenerationError
from .anthropic import AnthropicClient
from .gemini import GeminiClient

TextClient = Union[GeminiClient, AnthropicClient]


def create_client(api_key: Optional[str], provider: Optional[str] = None) -> TextClient:
    """Build a client for the configured provider.

    Args:
        api_key: The user's credential for the provider.
        provider: 'gemini' or 'anthropic'. Defaults to config.provider.

    Raises:
        GenerationError: If the key is missing or the provider is unknown.
    """
    provider = (provider or config.provider).lower()
    if provider == "gemini":
        return GeminiClient(api_key=api_key or "")
    if provider == "anthropic":
        return AnthropicClient(api_key=api_key or "")
    raise GenerationError(f"Unsupported generation provider: {provider}")


__all__ = [
    "AnthropicClient",
    "GeminiClient",
    "TextClient",
    "create_client",
]
