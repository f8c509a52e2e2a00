import pytest
from fastapi.testclient import TestClient
from structlog.testing import capture_logs

from solution_graph.api import dependencies
from solution_graph.api.dependencies import get_content_source_factory, get_settings
from solution_graph.configuration.github_config import GitHubSettings
from solution_graph.core.mechanism import RULESET_VERSION
from solution_graph.errors import ContentServiceError
from solution_graph.main import app

from conftest import FakeContentSource


@pytest.fixture
def client_with_source(contoso_source):
    tokens = []

    def _factory(token):
        tokens.append(token)
        return contoso_source

    app.dependency_overrides[get_content_source_factory] = lambda: _factory
    app.dependency_overrides[get_settings] = lambda: GitHubSettings(
        DEFAULT_REPOSITORY="Azure/Azure-Sentinel", DEFAULT_BRANCH="master", SOLUTIONS_ROOT="Solutions"
    )
    try:
        yield TestClient(app), tokens
    finally:
        app.dependency_overrides.clear()


def test_health() -> None:
    resp = TestClient(app).get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_list_solutions_uses_default_repository_and_token_header(client_with_source) -> None:
    client, tokens = client_with_source
    resp = client.get("/solutions", headers={"X-GitHub-Token": "secret"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["repository"] == "Azure/Azure-Sentinel"
    assert body["solutions"] == ["Alpha", "contoso", "Zeta"]
    assert tokens == ["secret"]


def test_graph_endpoint_returns_render_payload(client_with_source) -> None:
    client, _ = client_with_source
    resp = client.post("/graph", json={"repository": "Azure/Azure-Sentinel", "solution": "Contoso"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["solution"] == "Contoso"
    assert body["files_processed"] == 5
    assert body["ruleset_version"] == RULESET_VERSION
    assert body["solution_meta"]["solutionName"] == "Contoso Solution"
    node_ids = {n["id"] for n in body["graph"]["nodes"]}
    assert "connector:Contoso CCF" in node_ids
    for e in body["graph"]["edges"]:
        assert e["source"] in node_ids and e["target"] in node_ids


def test_graph_endpoint_validates_payload(client_with_source) -> None:
    client, _ = client_with_source
    assert client.post("/graph", json={"repository": "a/b"}).status_code == 422
    assert client.post("/graph", json={"solution": ""}).status_code == 422


def test_invalid_repository_is_bad_request(client_with_source) -> None:
    client, _ = client_with_source
    resp = client.post("/graph", json={"repository": "not-a-repo", "solution": "Contoso"})
    assert resp.status_code == 400
    assert resp.json()["status"] == "error"


def test_fatal_content_errors_map_to_bad_gateway() -> None:
    class Failing(FakeContentSource):
        async def list_directories(self, owner, repo, path):
            raise ContentServiceError("contents", 401, "Bad credentials")

    app.dependency_overrides[get_content_source_factory] = lambda: (lambda token: Failing())
    try:
        resp = TestClient(app).get("/solutions", params={"repository": "o/r"})
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 502
    assert resp.json() == {
        "status": "error",
        "detail": {"stage": "contents", "status_code": 401, "message": "GitHub API error 401: Bad credentials"},
    }


def test_content_client_is_built_from_injected_settings(monkeypatch) -> None:
    settings = GitHubSettings(
        GITHUB_API_URL="https://github.example.test/api/v3",
        DEFAULT_REPOSITORY="Contoso/Sentinel",
        _env_file=None,
    )
    built = []

    def _client(settings, token):
        built.append((settings, token))
        return FakeContentSource(directories=[{"name": "Alpha", "type": "dir"}])

    monkeypatch.setattr(dependencies, "GitHubContentClient", _client)
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        resp = TestClient(app).get("/solutions", headers={"X-GitHub-Token": "t"})
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 200
    assert resp.json()["repository"] == "Contoso/Sentinel"
    assert built == [(settings, "t")]


def test_default_settings_come_from_app_settings() -> None:
    from solution_graph.configuration.common_config import get_app_settings

    assert get_settings() is get_app_settings().github


def test_blank_solution_is_rejected_and_padding_is_stripped(client_with_source) -> None:
    client, _ = client_with_source
    assert client.post("/graph", json={"solution": "   "}).status_code == 422

    resp = client.post("/graph", json={"solution": "  Contoso  "})
    assert resp.status_code == 200
    assert resp.json()["solution"] == "Contoso"
    assert resp.json()["files_processed"] == 5


def test_error_handlers_log_dotted_events(client_with_source) -> None:
    client, _ = client_with_source
    with capture_logs() as logs:
        client.post("/graph", json={"repository": "not-a-repo", "solution": "Contoso"})
    assert any(e["event"] == "request.invalid_repository" for e in logs)

    class Failing(FakeContentSource):
        async def resolve_branch_tree_root(self, owner, repo, branch):
            raise ContentServiceError("branch", 404, "Not Found")

    app.dependency_overrides[get_content_source_factory] = lambda: (lambda token: Failing())
    with capture_logs() as logs:
        resp = client.post("/graph", json={"solution": "Contoso"})
    assert resp.status_code == 502
    assert any(e["event"] == "content_service.error" and e["stage"] == "branch" for e in logs)
