"""
Shared fixtures: an in-memory content source and representative solution artifacts.
"""

import json
from typing import Any, Dict, List, Optional

import pytest

from solution_graph.errors import ContentServiceError


class FakeContentSource:
    """In-memory ContentSource; ``files`` maps path -> document, bytes or an exception."""

    def __init__(
        self,
        files: Optional[Dict[str, Any]] = None,
        directories: Optional[List[Dict[str, Any]]] = None,
        tree_id: str = "tree-sha",
    ):
        self.files = files or {}
        self.directories = directories or []
        self.tree_id = tree_id
        self.fetched: List[str] = []

    async def __aenter__(self) -> "FakeContentSource":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def list_directories(self, owner, repo, path):
        return list(self.directories)

    async def resolve_branch_tree_root(self, owner, repo, branch):
        return self.tree_id

    async def list_tree_recursive(self, owner, repo, tree_id):
        return [{"path": p, "type": "blob"} for p in self.files]

    async def fetch_raw_file(self, owner, repo, branch, path):
        self.fetched.append(path)
        value = self.files[path]
        if isinstance(value, Exception):
            raise value
        if isinstance(value, bytes):
            return value
        return json.dumps(value).encode("utf-8")


def ccf_connector(title: str = "Contoso CCF", publisher: str = "Contoso") -> dict:
    return {
        "name": "ContosoConnector",
        "kind": "Customizable",
        "properties": {
            "connectorUiConfig": {
                "title": title,
                "publisher": publisher,
                "dataTypes": [{"name": "ContosoLogs_CL"}],
            }
        },
    }


def syslog_dcr(name: str = "contoso-dcr") -> dict:
    return {
        "type": "Microsoft.Insights/dataCollectionRules",
        "name": name,
        "properties": {
            "dataSources": {"syslog": [{"name": "sysLogsDataSource", "streams": ["Microsoft-Syslog"]}]},
            "destinations": {"logAnalytics": [{"name": "la-workspace"}]},
            "dataFlows": [
                {"streams": ["Microsoft-Syslog"], "destinations": ["la-workspace"]},
                {
                    "streams": ["Custom-ContosoLogs"],
                    "destinations": ["la-workspace"],
                    "transformKql": "source | extend x = 1 | into table ContosoAudit_CL",
                },
            ],
        },
    }


def hunting_query(name: str, query: str) -> dict:
    return {"name": name.replace(" ", ""), "properties": {"displayName": name, "query": query}}


def main_template() -> dict:
    return {
        "parameters": {
            "solutionName": {"defaultValue": "Contoso Solution"},
            "contactEmail": {"defaultValue": "support@contoso.com"},
            "publisher": {"defaultValue": "Contoso Ltd"},
        },
        "resources": [
            {
                "type": "Microsoft.OperationalInsights/workspaces/providers/Microsoft.SecurityInsights/dataConnectors",
                "name": "ContosoConnector",
                "properties": {"connectorType": "RestApiPoller", "dataTypes": ["ContosoLogs_CL"]},
            },
            {
                "type": "Microsoft.Insights/workbooks",
                "name": "ContosoWorkbook",
                "properties": {"displayName": "Contoso Overview"},
            },
            {
                "type": "Microsoft.OperationalInsights/workspaces/providers/Microsoft.SecurityInsights/alertRules",
                "name": "ContosoRule",
                "properties": {"displayName": "Contoso brute force", "severity": "High"},
            },
        ],
    }


@pytest.fixture
def contoso_files() -> Dict[str, Any]:
    root = "Solutions/Contoso"
    return {
        f"{root}/Data Connectors/ContosoConnector.json": ccf_connector(),
        f"{root}/Data Connectors/ContosoDCR.json": syslog_dcr(),
        f"{root}/Hunting Queries/FailedLogons.json": hunting_query(
            "Failed logons", "Syslog | where SyslogMessage has 'failed' | invoke ASIM_AuthenticationParser() | imAuthentication"
        ),
        f"{root}/Hunting Queries/Unrelated.json": hunting_query("Unrelated", "SecurityEvent | take 10"),
        f"{root}/Package/mainTemplate.json": main_template(),
        f"{root}/Data Connectors/broken.json": b"{not json",
        f"{root}/Data Connectors/missing.json": ContentServiceError("raw", 404, "Not Found"),
        "Solutions/Other/Data Connectors/OtherConnector.json": ccf_connector(title="Other"),
        f"{root}/README.md": {"ignored": True},
    }


@pytest.fixture
def contoso_source(contoso_files) -> FakeContentSource:
    return FakeContentSource(
        files=contoso_files,
        directories=[
            {"name": "Zeta", "type": "dir"},
            {"name": "contoso", "type": "dir"},
            {"name": "Alpha", "type": "dir"},
            {"name": "README.md", "type": "file"},
        ],
    )
