"""Hunting query collection and connector enrichment.

A query is a hit for a connector when any table the connector's dependencies
write to appears in the query body as a whole word (case-insensitive).
Normalization tokens (ASIM parsers, ``im*`` schema functions) are collected
from every hit.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

import structlog

from solution_graph.core.artifacts import Artifact, first_text
from solution_graph.core.records import ConnectorRecord, QueryArtifact, QueryHit


logger = structlog.get_logger(__name__)

_RE_HUNTING_DIR = re.compile(r"/hunting( queries)?/", re.IGNORECASE)
_RE_HUNTING = re.compile(r"hunting", re.IGNORECASE)

_RE_ASIM_TOKEN = re.compile(r"\bASIM[_A-Za-z0-9]+")
_RE_IM_TOKEN = re.compile(r"\bim[A-Z][A-Za-z0-9_]*")


def is_query_path(path: str) -> bool:
    if _RE_HUNTING_DIR.search(path):
        return True
    return bool(_RE_HUNTING.search("/".join(path.split("/")[-2:])))


def build_query_artifact(artifact: Artifact) -> Optional[QueryArtifact]:
    query = None
    for candidate in (artifact.prop("query"), artifact.get("query"), artifact.prop("kql")):
        if candidate:
            query = candidate
            break
    if not isinstance(query, str) or not query.strip():
        return None
    name = (
        first_text(artifact.prop("displayName"), artifact.prop("title"), artifact.get("name"))
        or artifact.file_name
    )
    return QueryArtifact(name=name, query=query, path=artifact.path)


def collect_queries(artifacts: Iterable[Artifact]) -> list[QueryArtifact]:
    out: list[QueryArtifact] = []
    for a in artifacts:
        if not is_query_path(a.path):
            continue
        q = build_query_artifact(a)
        if q is not None:
            out.append(q)
    return out


def extract_normalization_tokens(query: str) -> list[str]:
    tokens = _RE_ASIM_TOKEN.findall(query) + _RE_IM_TOKEN.findall(query)
    return list(dict.fromkeys(tokens))


def _table_pattern(table: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(table)}\b", re.IGNORECASE)


def enrich(connectors: Iterable[ConnectorRecord], queries: list[QueryArtifact]) -> None:
    """Attach hunting hits and normalization tokens to each connector in place."""

    for c in connectors:
        patterns = [_table_pattern(t) for t in sorted(c.table_names())]
        hits: list[QueryHit] = []
        norms: dict[str, None] = {}
        for q in queries:
            if not any(p.search(q.query) for p in patterns):
                continue
            hits.append(QueryHit(name=q.name, path=q.path))
            for tok in extract_normalization_tokens(q.query):
                norms[tok] = None
        c.hunting = hits
        c.normalization = list(norms)
        if hits:
            logger.debug("connector.enriched", connector=c.name, hits=len(hits), normalization=c.normalization)
