"""Client configuration with environment variable loading.

Pydantic-based configuration for the streaming query client.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file
load_dotenv()


class ClientConfig(BaseModel):
    """Configuration for talking to the match analysis backend.

    Attributes:
        api_base_url: Base URL of the backend service.
        request_timeout: HTTP timeout in seconds for each read.
        include_highlights: Default for the include-highlights flag.
        emphasize_order: Default for the preserve-order flag.
        audience: Default audience segment.
    """

    # Environment defaults arrive as strings and must be coerced
    model_config = ConfigDict(validate_default=True)

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Base URL of the analysis backend",
    )
    request_timeout: float = Field(
        default_factory=lambda: os.getenv("QUERY_TIMEOUT", "120"),
        gt=0.0,
        description="HTTP timeout in seconds",
    )
    include_highlights: bool = Field(
        default_factory=lambda: os.getenv("INCLUDE_HIGHLIGHTS", "true"),
        description="Ask for highlight videos by default",
    )
    emphasize_order: bool = Field(
        default_factory=lambda: os.getenv("EMPHASIZE_ORDER", "true"),
        description="Ask for key moments in match order by default",
    )
    audience: str = Field(
        default_factory=lambda: os.getenv("QUERY_AUDIENCE", "men"),
        min_length=1,
        description="Audience segment sent with every query",
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate the URL scheme and drop any trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("API_BASE_URL must start with http:// or https://")
        return v.rstrip("/")

    @property
    def stream_url(self) -> str:
        return f"{self.api_base_url}/query/stream"


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValueError: If API_BASE_URL is not an http(s) URL.
    """
    return ClientConfig()
