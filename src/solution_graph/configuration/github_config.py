"""
GitHub configuration settings.

Provides access configuration for the GitHub REST API (directory listing,
branch resolution, recursive trees) and the raw content host.
"""

from functools import lru_cache
from pydantic import Field, field_validator
from dotenv import load_dotenv

from .base_config import BaseConfig, normalize_base_url

load_dotenv()


class GitHubSettings(BaseConfig):
    """
    GitHub API configuration settings.

    Used when fetching solution packages:
    - Listing solution directories
    - Resolving a branch to its tree
    - Downloading raw artifact files
    """

    GITHUB_API_URL: str = Field(
        default="https://api.github.com",
        description="Base URL of the GitHub REST API"
    )

    GITHUB_RAW_URL: str = Field(
        default="https://raw.githubusercontent.com",
        description="Base URL of the raw content host"
    )

    GITHUB_TOKEN: str = Field(
        default="",
        description="Default access token; a token supplied with the request takes precedence"
    )

    GITHUB_TIMEOUT: float = Field(
        default=30.0,
        description="HTTP timeout for GitHub calls in seconds"
    )

    GITHUB_MAX_RETRIES: int = Field(
        default=0,
        description="Retries for connection/timeout failures; received error statuses are never retried"
    )

    DEFAULT_REPOSITORY: str = Field(
        default="Azure/Azure-Sentinel",
        description="Repository used when the request does not name one (owner/repo)"
    )

    DEFAULT_BRANCH: str = Field(
        default="master",
        description="Branch used when the request does not name one"
    )

    SOLUTIONS_ROOT: str = Field(
        default="Solutions",
        description="Repository directory holding one sub-directory per solution"
    )

    @field_validator('GITHUB_API_URL', 'GITHUB_RAW_URL')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """API and raw hosts are joined with paths, so no trailing slash is kept."""
        return normalize_base_url(v)

    @field_validator('GITHUB_TIMEOUT')
    @classmethod
    def validate_positive_timeout(cls, v: float) -> float:
        """Validate that timeout values are positive."""
        if v <= 0:
            raise ValueError('Timeout values must be positive')
        return v

    @field_validator('GITHUB_MAX_RETRIES')
    @classmethod
    def validate_non_negative_retries(cls, v: int) -> int:
        """Validate that retry count is non-negative."""
        if v < 0:
            raise ValueError('Max retries must be non-negative')
        return v


@lru_cache()
def get_github_settings() -> GitHubSettings:
    """
    Creates a cached instance of GitHubSettings.

    Returns:
        GitHubSettings: Cached GitHub configuration instance
    """
    return GitHubSettings()
