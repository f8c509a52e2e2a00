"""Graph assembly: solution -> source -> connector -> dependency -> table / normalization.

Node ids are namespaced by kind (``connector:Foo``) so a table and a connector
with the same display name stay distinct; the display name is kept as
``label``. Adding an existing id merges metadata (shallow overwrite) and
adding an existing (source, target, relation) edge is a no-op.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from solution_graph.core.records import (
    ConnectorRecord,
    DependencyRecord,
    GraphEdge,
    GraphNode,
    NodeKind,
    Relation,
    SolutionGraph,
    SolutionMetadata,
)


DEFAULT_SOLUTION_ID = "Solution"


def node_id(kind: NodeKind, key: str) -> str:
    return f"{kind}:{key}"


class GraphBuilder:
    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}
        self._edges: dict[tuple[str, str, str], GraphEdge] = {}

    def add_node(
        self,
        kind: NodeKind,
        key: Any,
        meta: Optional[dict[str, Any]] = None,
        label: Optional[str] = None,
    ) -> Optional[str]:
        if key is None or str(key) == "":
            return None
        k = str(key)
        nid = node_id(kind, k)
        existing = self._nodes.get(nid)
        if existing is None:
            self._nodes[nid] = GraphNode(id=nid, kind=kind, label=label or k, meta=dict(meta or {}))
        else:
            existing.meta = {**existing.meta, **(meta or {})}
        return nid

    def add_edge(self, source: Optional[str], target: Optional[str], relation: Relation) -> None:
        if not source or not target:
            return
        key = (source, target, relation)
        if key not in self._edges:
            self._edges[key] = GraphEdge(source=source, target=target, relation=relation)

    def build(self) -> SolutionGraph:
        return SolutionGraph(nodes=list(self._nodes.values()), edges=list(self._edges.values()))


def _connector_meta(c: ConnectorRecord) -> dict[str, Any]:
    return {
        "dataSource": c.data_source,
        "connectionType": c.connection_type,
        "mechanism": c.mechanism,
        "isCCF": c.is_ccf,
        "huntingCount": c.hunting_count,
        "hunting": [{"name": h.name, "path": h.path} for h in c.hunting],
        "normalization": list(c.normalization),
        "path": c.path,
    }


def _dependency_meta(d: DependencyRecord) -> dict[str, Any]:
    return {
        "streams": list(d.streams),
        "tables": list(d.tables),
        "destinations": list(d.destinations),
        "roles": list(d.roles),
    }


def add_connectors(
    builder: GraphBuilder,
    connectors: Iterable[ConnectorRecord],
    solution_meta: Optional[SolutionMetadata] = None,
) -> None:
    meta = solution_meta or SolutionMetadata()
    solution_id = builder.add_node(
        "solution",
        meta.solution_name or DEFAULT_SOLUTION_ID,
        {"contactEmail": meta.contact_email, "publisher": meta.publisher},
    )

    for c in connectors:
        connector_id = builder.add_node("connector", c.name, _connector_meta(c))
        source_id = builder.add_node("source", c.data_source, {})
        builder.add_edge(solution_id, connector_id, "solution-to-connector")
        builder.add_edge(source_id, connector_id, "ingests")

        for d in c.dependencies:
            dep_id = builder.add_node("dependency", d.name, _dependency_meta(d), label=f"DCR: {d.name}")
            builder.add_edge(connector_id, dep_id, "connector-to-dcr")
            for table in d.tables:
                table_id = builder.add_node("table", table, {})
                builder.add_edge(dep_id, table_id, "writes-to")

        if c.normalization:
            norm_id = builder.add_node(
                "normalization", c.name, {"tokens": list(c.normalization)}, label=f"Norm: {c.name}"
            )
            builder.add_edge(connector_id, norm_id, "uses-norm")


def assemble(
    connectors: Iterable[ConnectorRecord],
    solution_meta: Optional[SolutionMetadata] = None,
) -> SolutionGraph:
    builder = GraphBuilder()
    add_connectors(builder, connectors, solution_meta)
    return builder.build()
