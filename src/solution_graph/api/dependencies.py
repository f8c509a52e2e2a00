"""FastAPI dependencies for the graph API."""

from __future__ import annotations

from typing import Callable, Optional

from fastapi import Depends

from solution_graph.clients.github_client import GitHubContentClient
from solution_graph.configuration.common_config import get_app_settings
from solution_graph.configuration.github_config import GitHubSettings


ContentSourceFactory = Callable[[Optional[str]], GitHubContentClient]


def get_settings() -> GitHubSettings:
    return get_app_settings().github


def get_content_source_factory(
    settings: GitHubSettings = Depends(get_settings),
) -> ContentSourceFactory:
    """Return a factory building one content client per request token."""

    def _factory(token: Optional[str]) -> GitHubContentClient:
        return GitHubContentClient(settings=settings, token=token)

    return _factory
