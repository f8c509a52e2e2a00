"""Ingestion mechanism classifier.

Rules are evaluated in order and the first matching predicate wins. Signals
overlap between artifact shapes, so ordering is part of the contract:

1. connector UI config / ``kind == customizable``  -> CCF (pull)
2. data-collection-rule shape with agent sources   -> AMA (push)
3. data-collection-rule shape                      -> Logs Ingestion API (push)
4. text markers: event hub, logic app, function app, data collector API
5. default                                         -> Service-to-Service (pull)

UI-config artifacts sometimes embed data-source-like fields, hence (1) before (2).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from solution_graph.core.artifacts import Artifact, is_present
from solution_graph.core.records import MechanismResult


RULESET_VERSION = "2"

MECHANISM_CCF = "CCF"
MECHANISM_AMA = "AMA"
MECHANISM_LOGS_INGESTION_API = "Logs Ingestion API"
MECHANISM_EVENT_HUB = "Event Hub"
MECHANISM_LOGIC_APPS = "Logic Apps"
MECHANISM_AZURE_FUNCTIONS = "Azure Functions"
MECHANISM_DATA_COLLECTOR_API = "HTTP Data Collector API"
MECHANISM_SERVICE_TO_SERVICE = "Service-to-Service"

MECHANISMS = (
    MECHANISM_CCF,
    MECHANISM_AMA,
    MECHANISM_LOGS_INGESTION_API,
    MECHANISM_EVENT_HUB,
    MECHANISM_LOGIC_APPS,
    MECHANISM_AZURE_FUNCTIONS,
    MECHANISM_DATA_COLLECTOR_API,
    MECHANISM_SERVICE_TO_SERVICE,
)

DCR_RESOURCE_TYPE = "microsoft.insights/datacollectionrules"

Predicate = Callable[[Artifact], bool]


@dataclass(frozen=True)
class MechanismRule:
    name: str
    predicate: Predicate
    result: MechanismResult


def looks_like_dcr(artifact: Artifact) -> bool:
    """Data-collection-rule shape: resource type marker or dataSources/dataFlows fields."""

    return (
        DCR_RESOURCE_TYPE in artifact.text
        or artifact.data_sources is not None
        or artifact.data_flows is not None
    )


def has_agent_sources(artifact: Artifact) -> bool:
    ds = artifact.data_sources
    ds = ds if isinstance(ds, dict) else {}
    has_syslog = is_present(ds.get("syslog")) or "syslog" in artifact.text
    has_windows = is_present(ds.get("windowsEvent")) or "windowsevent" in artifact.text
    return has_syslog or has_windows


def is_ccf(artifact: Artifact) -> bool:
    return artifact.has_ui_config or artifact.kind == "customizable"


def text_contains(*markers: str) -> Predicate:
    def _predicate(artifact: Artifact) -> bool:
        return any(m in artifact.text for m in markers)

    return _predicate


def _all(*predicates: Predicate) -> Predicate:
    def _predicate(artifact: Artifact) -> bool:
        return all(p(artifact) for p in predicates)

    return _predicate


DEFAULT_RESULT = MechanismResult("pull", MECHANISM_SERVICE_TO_SERVICE, is_ccf=False)

DEFAULT_RULES: tuple[MechanismRule, ...] = (
    MechanismRule("ccf", is_ccf, MechanismResult("pull", MECHANISM_CCF, is_ccf=True)),
    MechanismRule(
        "dcr-agent",
        _all(looks_like_dcr, has_agent_sources),
        MechanismResult("push", MECHANISM_AMA, is_ccf=False),
    ),
    MechanismRule(
        "dcr-direct",
        looks_like_dcr,
        MechanismResult("push", MECHANISM_LOGS_INGESTION_API, is_ccf=False),
    ),
    MechanismRule("event-hub", text_contains("eventhub"), MechanismResult("push", MECHANISM_EVENT_HUB, is_ccf=False)),
    MechanismRule(
        "logic-apps",
        text_contains("logic app", "workflows"),
        MechanismResult("pull", MECHANISM_LOGIC_APPS, is_ccf=False),
    ),
    MechanismRule(
        "azure-functions",
        text_contains("azure function", "functionapp"),
        MechanismResult("pull", MECHANISM_AZURE_FUNCTIONS, is_ccf=False),
    ),
    MechanismRule(
        "data-collector-api",
        text_contains("data collector api"),
        MechanismResult("push", MECHANISM_DATA_COLLECTOR_API, is_ccf=False),
    ),
)


def _as_artifact(value: Any) -> Artifact:
    return value if isinstance(value, Artifact) else Artifact(path="", document=value)


def match_rule(artifact: Any, rules: Iterable[MechanismRule] = DEFAULT_RULES) -> MechanismRule | None:
    a = _as_artifact(artifact)
    for rule in rules:
        if rule.predicate(a):
            return rule
    return None


def classify(artifact: Any, rules: Iterable[MechanismRule] = DEFAULT_RULES) -> MechanismResult:
    """Return direction, mechanism and CCF flag; never fails."""

    rule = match_rule(artifact, rules)
    return rule.result if rule is not None else DEFAULT_RESULT
