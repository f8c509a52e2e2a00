"""Graph contract validation.

Validates invariants before the graph is handed to the rendering surface.
"""

from __future__ import annotations

from dataclasses import dataclass

from solution_graph.core.records import SolutionGraph


@dataclass(frozen=True)
class GraphContractViolation(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


def validate_graph(graph: SolutionGraph) -> None:
    node_ids = [n.id for n in graph.nodes]
    if any(not nid for nid in node_ids):
        raise GraphContractViolation("Node id is empty")
    if len(node_ids) != len(set(node_ids)):
        raise GraphContractViolation("Duplicate node id detected")

    known = set(node_ids)
    seen: set[tuple[str, str, str]] = set()
    for e in graph.edges:
        if e.source not in known:
            raise GraphContractViolation(f"Edge source missing from nodes: {e.source}")
        if e.target not in known:
            raise GraphContractViolation(f"Edge target missing from nodes: {e.target}")
        key = (e.source, e.target, e.relation)
        if key in seen:
            raise GraphContractViolation(f"Duplicate edge: {e.source} -[{e.relation}]-> {e.target}")
        seen.add(key)
