"""Read-only view over one parsed solution artifact.

Artifacts have no canonical schema, so every accessor is opportunistic: it
looks in the places the known artifact shapes put a field and returns
``None`` (or an empty value) when nothing is there.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Optional

from solution_graph.errors import ArtifactParseError


def is_present(value: Any) -> bool:
    """Presence test for loosely typed JSON fields.

    Containers count as present even when empty; scalars follow truthiness.
    """

    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def first_present(*values: Any) -> Any:
    for v in values:
        if is_present(v):
            return v
    return None


def first_text(*values: Any) -> Optional[str]:
    """First non-blank string among ``values``, stripped."""

    for v in values:
        if isinstance(v, str) and v.strip():
            return v.strip()
    return None


def base_name(path: str) -> str:
    return path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class Artifact:
    path: str
    document: Any

    @cached_property
    def text(self) -> str:
        """Compact, lower-cased serialization used by substring heuristics."""
        return json.dumps(self.document, separators=(",", ":"), ensure_ascii=False, default=str).lower()

    @property
    def file_name(self) -> str:
        return base_name(self.path)

    @property
    def stem(self) -> str:
        name = self.file_name
        if name.lower().endswith(".json"):
            return name[: -len(".json")]
        return name

    def get(self, key: str) -> Any:
        if isinstance(self.document, dict):
            return self.document.get(key)
        return None

    @property
    def properties(self) -> Optional[dict]:
        props = self.get("properties")
        return props if isinstance(props, dict) else None

    def prop(self, key: str) -> Any:
        props = self.properties
        return props.get(key) if props is not None else None

    @property
    def ui_config(self) -> Optional[dict]:
        ui = first_present(self.prop("connectorUiConfig"), self.prop("connectorUIConfig"))
        return ui if isinstance(ui, dict) else None

    @property
    def has_ui_config(self) -> bool:
        return first_present(self.prop("connectorUiConfig"), self.prop("connectorUIConfig")) is not None

    @property
    def kind(self) -> str:
        k = first_present(self.get("kind"), self.prop("kind"))
        return k.lower() if isinstance(k, str) else ""

    @property
    def data_sources(self) -> Any:
        return first_present(self.prop("dataSources"), self.get("dataSources"))

    @property
    def data_flows(self) -> Any:
        return first_present(self.prop("dataFlows"), self.get("dataFlows"))

    @property
    def rule_body(self) -> Any:
        """``properties`` when present, otherwise the document itself."""
        return self.properties if self.properties is not None else self.document


def parse_artifact(path: str, payload: Any) -> Artifact:
    """Wrap raw file content (bytes/str) or an already parsed document."""

    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = payload.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ArtifactParseError(path, str(e)) from e
    if isinstance(payload, str):
        try:
            return Artifact(path=path, document=json.loads(payload))
        except (ValueError, RecursionError) as e:
            raise ArtifactParseError(path, str(e)) from e
    return Artifact(path=path, document=payload)
