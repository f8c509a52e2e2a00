"""
Application settings: HTTP port, log level and the nested GitHub access settings.
"""
import logging
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, field_validator

from .base_config import BaseConfig
from .github_config import GitHubSettings

load_dotenv()

SERVICE_NAME = "solution-graph-service"


class AppSettings(BaseConfig):
    """
    Everything the API process needs at startup.

    ``github`` is built from the same environment, so ``GITHUB_*`` and
    ``DEFAULT_*`` variables apply without a prefix.
    """

    API_PORT: int = Field(
        default=8000,
        description="Port uvicorn listens on"
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level name (DEBUG, INFO, WARNING, ERROR)"
    )

    github: GitHubSettings = Field(default_factory=GitHubSettings)

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only stdlib level names are accepted."""
        name = v.strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f'Unknown log level: {v}')
        return name


@lru_cache()
def get_app_settings() -> AppSettings:
    """Cached AppSettings, loaded once per process."""
    return AppSettings()
