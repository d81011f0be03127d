"""Configuration management for the news feed browser.

All configuration comes from environment variables. Uses pydantic-settings
for validation so a missing API base URL or a malformed number fails at
startup rather than on the first fetch.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Client configuration loaded from environment variables."""

    news_api_base: str = Field(alias="NEWS_API_BASE")
    news_api_timeout: float = Field(default=30.0, alias="NEWS_API_TIMEOUT")
    debounce_ms: int = Field(default=400, ge=0, alias="NEWS_DEBOUNCE_MS")
    server_host: str = Field(default="127.0.0.1", alias="MCP_SERVER_HOST")
    server_port: int = Field(default=8000, alias="MCP_SERVER_PORT")

    model_config = SettingsConfigDict(
        populate_by_name=True,
        extra="ignore",
    )

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


def load_config() -> Config:
    """Load and validate config from environment. Raises on missing required vars."""
    return Config()
