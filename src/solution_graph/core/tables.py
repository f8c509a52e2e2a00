"""Destination table inference for data-collection-rule artifacts.

Two independent sources are unioned per data flow:
- declared stream names, via a static well-known map or the ``Custom-`` prefix
- ``into table <name>`` clauses in the flow's transform expression

Streams matching neither rule are dropped; inference is best effort.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from solution_graph.core.artifacts import Artifact


STREAM_TO_TABLE = {
    "microsoft-syslog": "Syslog",
    "microsoft-windowsevent": "WindowsEvents",
    "microsoft-commonsecuritylog": "CommonSecurityLog",
    "microsoft-azurefirewall": "AzureDiagnostics",
    "microsoft-perf": "Perf",
}

CUSTOM_STREAM_PREFIX = "custom-"
CUSTOM_TABLE_SUFFIX = "_CL"

_RE_INTO_TABLE = re.compile(r"into\s+table\s+([a-z0-9_]+)", re.IGNORECASE)
_RE_NON_ALNUM = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def map_stream_to_table(stream_name: Any) -> Optional[str]:
    if not isinstance(stream_name, str) or not stream_name:
        return None
    key = stream_name.lower().strip()
    if key in STREAM_TO_TABLE:
        return STREAM_TO_TABLE[key]
    if key.startswith(CUSTOM_STREAM_PREFIX):
        suffix = _RE_NON_ALNUM.sub("", key[len(CUSTOM_STREAM_PREFIX):])
        if suffix:
            return f"{suffix}{CUSTOM_TABLE_SUFFIX}"
    return None


def tables_from_transform(transform: Any) -> list[str]:
    if not isinstance(transform, str):
        return []
    return [m.group(1) for m in _RE_INTO_TABLE.finditer(transform.lower())]


def _data_flows(artifact: Artifact) -> list[dict]:
    body = artifact.rule_body
    flows = body.get("dataFlows") if isinstance(body, dict) else None
    if not isinstance(flows, list):
        return []
    return [df for df in flows if isinstance(df, dict)]


def _streams(flow: dict) -> list:
    streams = flow.get("streams")
    return streams if isinstance(streams, list) else []


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(v for v in values if v))


def infer_tables(artifact: Artifact) -> list[str]:
    """Ordered, de-duplicated destination table names."""

    found: list[str] = []
    for df in _data_flows(artifact):
        for s in _streams(df):
            table = map_stream_to_table(s)
            if table:
                found.append(table)
        found.extend(tables_from_transform(df.get("transformKql")))
    return _unique(found)


def pick_streams(artifact: Artifact) -> list[str]:
    return _unique(
        s for df in _data_flows(artifact) for s in _streams(df) if isinstance(s, str)
    )
