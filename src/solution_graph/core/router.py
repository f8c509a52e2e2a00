"""Artifact routing: split a solution's artifacts into connectors and dependencies.

Each artifact lands in at most one collection. Dependency detection runs
first; artifacts with no positive signal are omitted silently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

import structlog

from solution_graph.core.artifacts import Artifact, first_text
from solution_graph.core.mechanism import classify, looks_like_dcr
from solution_graph.core.records import ConnectorRecord, DependencyRecord
from solution_graph.core.tables import infer_tables, pick_streams


logger = structlog.get_logger(__name__)

DEFAULT_DCR_ROLES = ("Monitoring Metrics Publisher",)
CONNECTOR_TEXT_MARKER = "dataconnector"
UNNAMED_CONNECTOR = "Unnamed Connector"


@dataclass
class RoutingResult:
    connectors: list[ConnectorRecord] = field(default_factory=list)
    dependencies: list[DependencyRecord] = field(default_factory=list)


def build_dependency(artifact: Artifact) -> DependencyRecord:
    destinations = artifact.prop("destinations")
    return DependencyRecord(
        name=first_text(artifact.get("name")) or artifact.file_name,
        streams=tuple(pick_streams(artifact)),
        tables=tuple(infer_tables(artifact)),
        destinations=tuple(destinations.keys()) if isinstance(destinations, dict) else (),
        roles=DEFAULT_DCR_ROLES,
        path=artifact.path,
    )


def has_connector_signals(artifact: Artifact) -> bool:
    return artifact.has_ui_config or CONNECTOR_TEXT_MARKER in artifact.text


def extract_connector_name(artifact: Artifact) -> str:
    ui = artifact.ui_config or {}
    return (
        first_text(ui.get("title"), ui.get("displayName"), artifact.get("name"), artifact.file_name)
        or UNNAMED_CONNECTOR
    )


def extract_data_source(artifact: Artifact, solution_name: Optional[str]) -> str:
    ui = artifact.ui_config or {}
    return (
        first_text(ui.get("publisherName"), ui.get("publisher"), solution_name, artifact.stem)
        or "Unknown"
    )


def build_connector(artifact: Artifact, solution_name: Optional[str]) -> ConnectorRecord:
    result = classify(artifact)
    return ConnectorRecord(
        name=extract_connector_name(artifact),
        data_source=extract_data_source(artifact, solution_name),
        connection_type=result.connection_type,
        mechanism=result.mechanism,
        is_ccf=result.is_ccf,
        path=artifact.path,
    )


def route_artifacts(artifacts: Iterable[Artifact], solution_name: Optional[str] = None) -> RoutingResult:
    out = RoutingResult()
    for a in artifacts:
        if looks_like_dcr(a):
            dep = build_dependency(a)
            out.dependencies.append(dep)
            logger.debug("artifact.dependency", path=a.path, name=dep.name, tables=list(dep.tables))
            continue
        if has_connector_signals(a):
            c = build_connector(a, solution_name)
            out.connectors.append(c)
            logger.debug("artifact.connector", path=a.path, name=c.name, mechanism=c.mechanism)

    # No cross-reference field links a rule to a specific connector, so every
    # dependency is attached to every connector of the solution.
    for c in out.connectors:
        c.dependencies = list(out.dependencies)
    return out


def dedupe_connectors(connectors: Iterable[ConnectorRecord]) -> list[ConnectorRecord]:
    """Keep the first connector of each name."""

    seen: set[str] = set()
    unique: list[ConnectorRecord] = []
    for c in connectors:
        if c.name in seen:
            continue
        seen.add(c.name)
        unique.append(c)
    return unique
