"""Solution package metadata from the solution's ``mainTemplate.json``."""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from solution_graph.core.artifacts import Artifact
from solution_graph.core.records import SolutionMetadata


_RE_MAIN_TEMPLATE = re.compile(r"maintemplate\.json$", re.IGNORECASE)

DATA_CONNECTOR_TYPE = "microsoft.securityinsights/dataconnector"
WORKBOOK_TYPE = "microsoft.insights/workbooks"
ALERT_RULE_TYPE = "microsoft.securityinsights/alertrules"


def is_main_template_path(path: str) -> bool:
    return bool(_RE_MAIN_TEMPLATE.search(path))


def find_main_template(artifacts: Iterable[Artifact]) -> Optional[Artifact]:
    return next((a for a in artifacts if is_main_template_path(a.path)), None)


def _default_value(parameters: Any, name: str) -> str:
    if not isinstance(parameters, dict):
        return ""
    param = parameters.get(name)
    value = param.get("defaultValue") if isinstance(param, dict) else None
    return value if isinstance(value, str) else ""


def _props(resource: dict) -> dict:
    props = resource.get("properties")
    return props if isinstance(props, dict) else {}


def extract_solution_metadata(template: Artifact) -> SolutionMetadata:
    parameters = template.get("parameters")
    connectors: list[dict] = []
    workbooks: list[dict] = []
    rules: list[dict] = []

    resources = template.get("resources")
    for r in resources if isinstance(resources, list) else []:
        if not isinstance(r, dict):
            continue
        rtype = r.get("type")
        rtype = rtype.lower() if isinstance(rtype, str) else ""
        props = _props(r)
        if DATA_CONNECTOR_TYPE in rtype:
            connectors.append(
                {
                    "name": r.get("name"),
                    "dataType": props.get("dataTypes") or "",
                    "mechanism": props.get("connectorType") or "",
                }
            )
        if WORKBOOK_TYPE in rtype:
            workbooks.append({"name": r.get("name"), "displayName": props.get("displayName") or ""})
        if ALERT_RULE_TYPE in rtype:
            rules.append(
                {
                    "name": r.get("name"),
                    "displayName": props.get("displayName") or "",
                    "severity": props.get("severity") or "",
                }
            )

    return SolutionMetadata(
        solution_name=_default_value(parameters, "solutionName"),
        contact_email=_default_value(parameters, "contactEmail"),
        publisher=_default_value(parameters, "publisher"),
        connectors=tuple(connectors),
        workbooks=tuple(workbooks),
        analytics_rules=tuple(rules),
    )


def solution_metadata_for(artifacts: Iterable[Artifact]) -> Optional[SolutionMetadata]:
    template = find_main_template(artifacts)
    if template is None or not isinstance(template.document, dict):
        return None
    return extract_solution_metadata(template)
