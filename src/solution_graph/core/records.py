"""Internal record contracts for classification, enrichment and graph output."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional


ConnectionType = Literal["pull", "push"]
Mechanism = str  # see core.mechanism.MECHANISMS
NodeKind = Literal["solution", "source", "connector", "dependency", "table", "normalization"]
Relation = Literal["solution-to-connector", "ingests", "connector-to-dcr", "writes-to", "uses-norm"]


@dataclass(frozen=True)
class MechanismResult:
    connection_type: ConnectionType
    mechanism: Mechanism
    is_ccf: bool


@dataclass(frozen=True)
class DependencyRecord:
    """Data-collection-rule shaped artifact, solution scoped."""

    name: str
    streams: tuple[str, ...]
    tables: tuple[str, ...]
    destinations: tuple[str, ...]
    roles: tuple[str, ...]
    path: str


@dataclass(frozen=True)
class QueryArtifact:
    name: str
    query: str
    path: str


@dataclass(frozen=True)
class QueryHit:
    name: str
    path: str


@dataclass
class ConnectorRecord:
    """One connector definition; enrichment attaches hunting hits and tokens in place."""

    name: str
    data_source: str
    connection_type: ConnectionType
    mechanism: Mechanism
    is_ccf: bool
    path: str
    dependencies: list[DependencyRecord] = field(default_factory=list)
    hunting: list[QueryHit] = field(default_factory=list)
    normalization: list[str] = field(default_factory=list)

    @property
    def hunting_count(self) -> int:
        return len(self.hunting)

    def table_names(self) -> set[str]:
        return {t for d in self.dependencies for t in d.tables}


@dataclass(frozen=True)
class SolutionMetadata:
    solution_name: str = ""
    contact_email: str = ""
    publisher: str = ""
    connectors: tuple[dict, ...] = ()
    workbooks: tuple[dict, ...] = ()
    analytics_rules: tuple[dict, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "solutionName": self.solution_name,
            "contactEmail": self.contact_email,
            "publisher": self.publisher,
            "connectors": [dict(c) for c in self.connectors],
            "workbooks": [dict(w) for w in self.workbooks],
            "analyticsRules": [dict(r) for r in self.analytics_rules],
        }


@dataclass
class GraphNode:
    id: str
    kind: NodeKind
    label: str
    meta: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": self.kind, "label": self.label, "meta": dict(self.meta)}


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str
    relation: Relation

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "target": self.target, "type": self.relation}


@dataclass
class SolutionGraph:
    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)

    def node(self, node_id: str) -> Optional[GraphNode]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def to_dict(self) -> dict[str, Any]:
        """Payload handed to the rendering surface."""
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
