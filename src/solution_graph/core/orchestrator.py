"""Solution visualization orchestrator.

Pipeline:
resolve branch -> list tree -> fetch each JSON artifact (sequential, skip on failure)
-> route -> collect queries -> enrich -> solution metadata -> de-dup -> assemble -> validate

Directory listing and tree resolution failures propagate to the caller;
per-file fetch and parse failures are logged and skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import structlog

from solution_graph.clients.base import ContentSource
from solution_graph.core.artifacts import Artifact, parse_artifact
from solution_graph.core.graph_builder import assemble
from solution_graph.core.graph_contract import validate_graph
from solution_graph.core.mechanism import RULESET_VERSION
from solution_graph.core.queries import collect_queries, enrich
from solution_graph.core.records import (
    ConnectorRecord,
    DependencyRecord,
    QueryArtifact,
    SolutionGraph,
    SolutionMetadata,
)
from solution_graph.core.router import dedupe_connectors, route_artifacts
from solution_graph.core.solution_meta import solution_metadata_for
from solution_graph.errors import ArtifactParseError, ContentServiceError, InvalidRepositoryError
from solution_graph.observability.tracing import get_tracer, phase_span


logger = structlog.get_logger(__name__)
tracer = get_tracer(__name__)

DEFAULT_SOLUTIONS_ROOT = "Solutions"


@dataclass
class SolutionListing:
    solutions: list[str]
    status: str


@dataclass
class VisualizationResult:
    solution: str
    graph: SolutionGraph
    status: str
    files_processed: int = 0
    connectors: list[ConnectorRecord] = field(default_factory=list)
    dependencies: list[DependencyRecord] = field(default_factory=list)
    queries: list[QueryArtifact] = field(default_factory=list)
    solution_meta: Optional[SolutionMetadata] = None
    ruleset_version: str = RULESET_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "solution": self.solution,
            "status": self.status,
            "files_processed": self.files_processed,
            "ruleset_version": self.ruleset_version,
            "solution_meta": self.solution_meta.to_dict() if self.solution_meta else None,
            "graph": self.graph.to_dict(),
        }


def parse_repository(repository: str) -> tuple[str, str]:
    value = (repository or "").strip()
    owner, sep, repo = value.partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise InvalidRepositoryError(f"Repository must be like Azure/Azure-Sentinel, got {repository!r}")
    return owner, repo


async def list_solutions(
    source: ContentSource,
    owner: str,
    repo: str,
    solutions_root: str = DEFAULT_SOLUTIONS_ROOT,
) -> SolutionListing:
    with phase_span(tracer, "list_solutions", owner=owner, repo=repo):
        entries = await source.list_directories(owner, repo, solutions_root)
    dirs = sorted(
        (e["name"] for e in entries if e.get("type") == "dir" and e.get("name")),
        key=str.casefold,
    )
    if not dirs:
        return SolutionListing(solutions=[], status=f"No Solutions found under /{solutions_root}")
    logger.info("solutions.listed", owner=owner, repo=repo, count=len(dirs))
    return SolutionListing(solutions=dirs, status=f"Loaded {len(dirs)} solutions.")


async def list_solution_json_paths(
    source: ContentSource,
    owner: str,
    repo: str,
    branch: str,
    solution: str,
    solutions_root: str = DEFAULT_SOLUTIONS_ROOT,
) -> list[str]:
    with phase_span(tracer, "list_tree", branch=branch) as span:
        tree_id = await source.resolve_branch_tree_root(owner, repo, branch)
        span.set_attribute("tree_id", tree_id)
        tree = await source.list_tree_recursive(owner, repo, tree_id)
    prefix = f"{solutions_root}/{solution}/"
    return [
        it["path"]
        for it in tree
        if it.get("type") == "blob"
        and isinstance(it.get("path"), str)
        and it["path"].startswith(prefix)
        and it["path"].lower().endswith(".json")
    ]


async def load_artifacts(
    source: ContentSource,
    owner: str,
    repo: str,
    branch: str,
    paths: list[str],
) -> list[Artifact]:
    """Fetch and parse each path in order; failures skip only that file."""

    artifacts: list[Artifact] = []
    with phase_span(tracer, "fetch", files_discovered=len(paths)) as span:
        for p in paths:
            try:
                payload = await source.fetch_raw_file(owner, repo, branch, p)
            except ContentServiceError as e:
                logger.warning("artifact.skipped", path=p, reason="fetch", status_code=e.status_code)
                continue
            try:
                artifacts.append(parse_artifact(p, payload))
            except ArtifactParseError as e:
                logger.warning("artifact.skipped", path=p, reason="parse", error=e.reason)
                continue
        span.set_attribute("files_processed", len(artifacts))
    return artifacts


def build_solution_graph(artifacts: list[Artifact], solution: str) -> VisualizationResult:
    """Classify, link and enrich already loaded artifacts; no I/O."""

    with phase_span(tracer, "route", ruleset_version=RULESET_VERSION):
        routed = route_artifacts(artifacts, solution)
    with phase_span(tracer, "enrich"):
        queries = collect_queries(artifacts)
        enrich(routed.connectors, queries)
    meta = solution_metadata_for(artifacts)
    if meta is None:
        logger.warning("solution_meta.missing", solution=solution)

    connectors = dedupe_connectors(routed.connectors)
    with phase_span(tracer, "assemble"):
        graph = assemble(connectors, meta)
        validate_graph(graph)

    if not connectors and not routed.dependencies:
        status = "No connectors or dependencies detected in this solution."
    else:
        status = (
            f"Done. Files processed: {len(artifacts)}. "
            f"Rendered {len(graph.nodes)} nodes / {len(graph.edges)} links."
        )
    return VisualizationResult(
        solution=solution,
        graph=graph,
        status=status,
        files_processed=len(artifacts),
        connectors=connectors,
        dependencies=routed.dependencies,
        queries=queries,
        solution_meta=meta,
    )


async def visualize_solution(
    source: ContentSource,
    owner: str,
    repo: str,
    branch: str,
    solution: str,
    solutions_root: str = DEFAULT_SOLUTIONS_ROOT,
) -> VisualizationResult:
    with phase_span(tracer, "visualize", solution=solution, branch=branch):
        logger.info("pipeline.start", owner=owner, repo=repo, branch=branch, solution=solution)

        paths = await list_solution_json_paths(source, owner, repo, branch, solution, solutions_root)
        if not paths:
            logger.info("pipeline.empty", solution=solution)
            return VisualizationResult(
                solution=solution,
                graph=SolutionGraph(),
                status="No JSON files found in this solution.",
            )

        artifacts = await load_artifacts(source, owner, repo, branch, paths)
        result = build_solution_graph(artifacts, solution)
        logger.info(
            "pipeline.done",
            solution=solution,
            files_discovered=len(paths),
            files_processed=result.files_processed,
            connectors=len(result.connectors),
            dependencies=len(result.dependencies),
            nodes=len(result.graph.nodes),
            edges=len(result.graph.edges),
        )
        return result
