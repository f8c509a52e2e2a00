"""Solution listing and graph endpoints."""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Header, Query

from solution_graph.api.dependencies import ContentSourceFactory, get_content_source_factory, get_settings
from solution_graph.api.schemas import GraphRequest, GraphResponse, SolutionListResponse
from solution_graph.configuration.github_config import GitHubSettings
from solution_graph.configuration.logging_config import bound_request_context
from solution_graph.core.orchestrator import list_solutions, parse_repository, visualize_solution


logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Solutions"])


@router.get("/solutions", response_model=SolutionListResponse)
async def list_solutions_endpoint(
    repository: Optional[str] = Query(default=None),
    token: Optional[str] = Header(default=None, alias="X-GitHub-Token"),
    settings: GitHubSettings = Depends(get_settings),
    source_factory: ContentSourceFactory = Depends(get_content_source_factory),
) -> SolutionListResponse:
    repository = repository or settings.DEFAULT_REPOSITORY
    owner, repo = parse_repository(repository)
    with bound_request_context(repository=repository):
        async with source_factory(token) as source:
            listing = await list_solutions(source, owner, repo, settings.SOLUTIONS_ROOT)
    return SolutionListResponse(repository=repository, solutions=listing.solutions, status=listing.status)


@router.post("/graph", response_model=GraphResponse)
async def solution_graph_endpoint(
    payload: GraphRequest,
    token: Optional[str] = Header(default=None, alias="X-GitHub-Token"),
    settings: GitHubSettings = Depends(get_settings),
    source_factory: ContentSourceFactory = Depends(get_content_source_factory),
) -> GraphResponse:
    owner, repo = parse_repository(payload.repository or settings.DEFAULT_REPOSITORY)
    branch = (payload.branch or settings.DEFAULT_BRANCH).strip()
    solution = payload.solution
    with bound_request_context(repository=f"{owner}/{repo}", branch=branch, solution=solution):
        async with source_factory(token) as source:
            result = await visualize_solution(source, owner, repo, branch, solution, settings.SOLUTIONS_ROOT)
    return GraphResponse.model_validate(result.to_dict())
