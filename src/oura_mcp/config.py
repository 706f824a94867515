"""Configuration management."""

import logging
from functools import cache
from typing import TextIO

from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .consts import (
    DEFAULT_BASE_URL,
    DEFAULT_REDIRECT_URI,
    DEFAULT_TOKEN_URL,
    USERCOLLECTION_PATH,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Config(BaseSettings):
    """Configuration sourced from OURA_* environment variables (or a .env file)."""

    model_config = SettingsConfigDict(
        env_prefix="OURA_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    personal_access_token: SecretStr | None = Field(
        default=None, description="Static personal access token"
    )
    client_id: str | None = Field(default=None, description="OAuth2 client id")
    client_secret: SecretStr | None = Field(
        default=None, description="OAuth2 client secret"
    )
    redirect_uri: str = Field(
        default=DEFAULT_REDIRECT_URI,
        description="OAuth2 redirect URI registered for the application",
    )
    refresh_token: SecretStr | None = Field(
        default=None, description="Previously issued OAuth2 refresh token"
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Base URL for the Oura API"
    )
    token_url: str = Field(
        default=DEFAULT_TOKEN_URL, description="OAuth2 token endpoint"
    )
    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
        description="Logging level",
    )
    timeout_seconds: int = Field(
        default=30, gt=0, le=300, description="HTTP request timeout in seconds"
    )

    @computed_field
    @property
    def usercollection_url(self) -> str:
        """Base URL for user data collections."""
        return f"{self.base_url.rstrip('/')}{USERCOLLECTION_PATH}"


@cache
def get_config() -> Config:
    """Get a cached Config instance."""
    return Config()


def setup_logging(log_level: str = "INFO", stream: TextIO | None = None) -> logging.Logger:
    """Configure logging for the entire application.

    All records go to ``stream`` (the diagnostic channel), never to the
    protocol transport.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        stream=stream,
        force=True,  # Override any existing configuration
    )
    return logging.getLogger("oura-mcp")
