"""Configuration management."""

import os
from pathlib import Path
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

PROVIDERS = ("gemini", "anthropic")


class Config(BaseModel):
    """Application configuration."""

    # Generation endpoint
    provider: str = Field(
        default_factory=lambda: os.getenv("VSG_PROVIDER", "gemini").lower(),
        description="Text generation provider: 'gemini' or 'anthropic'"
    )
    gemini_base_url: str = Field(
        default_factory=lambda: os.getenv(
            "VSG_GEMINI_BASE_URL",
            "https://generativelanguage.googleapis.com/v1beta/models",
        ),
        description="Base URL of the Gemini generateContent endpoint"
    )
    gemini_model: str = Field(
        default_factory=lambda: os.getenv("VSG_GEMINI_MODEL", "gemini-2.0-flash"),
        description="Gemini model name"
    )
    anthropic_model: str = Field(
        default_factory=lambda: os.getenv("VSG_ANTHROPIC_MODEL", "claude-sonnet-4-20250514"),
        description="Claude model name"
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("VSG_REQUEST_TIMEOUT", "30")),
        description="Seconds before a generation request is abandoned",
        gt=0
    )

    # Paths
    data_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("VSG_DATA_DIR", "~/.vsg")).expanduser(),
        description="Directory holding persisted user and project state"
    )
    export_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("VSG_EXPORT_DIR", ".")),
        description="Default directory for exported projects"
    )

    class Config:
        """Pydantic config."""
        frozen = False

    def validate_provider(self) -> None:
        """Validate that the configured provider is supported.

        Raises:
            ValueError: If the provider is unknown.
        """
        if self.provider not in PROVIDERS:
            raise ValueError(
                f"Unsupported VSG_PROVIDER '{self.provider}'. "
                f"Expected one of: {', '.join(PROVIDERS)}"
            )

    @property
    def model(self) -> str:
        """Return the model name for the configured provider."""
        if self.provider == "anthropic":
            return self.anthropic_model
        return self.gemini_model


# Global config instance
config = Config()
