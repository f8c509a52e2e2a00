"""
Async GitHub client implementing the content source contract.

Directory listing, branch resolution and tree listing go through the REST
API; file bodies come from the raw content host.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from solution_graph.configuration.github_config import GitHubSettings, get_github_settings
from solution_graph.errors import ContentServiceError

logger = structlog.get_logger(__name__)


class GitHubContentClient:
    """Async HTTP client for the GitHub contents, branches, trees and raw endpoints."""

    def __init__(
        self,
        settings: Optional[GitHubSettings] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_github_settings()
        self.token = (token or self.settings.GITHUB_TOKEN or "").strip()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "GitHubContentClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    async def _ensure_client(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.GITHUB_TIMEOUT),
                headers=self._headers(),
                transport=self._transport,
                follow_redirects=True,
            )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _get(self, url: str, **kwargs) -> httpx.Response:
        await self._ensure_client()

        @retry(
            stop=stop_after_attempt(self.settings.GITHUB_MAX_RETRIES + 1),
            wait=wait_exponential(multiplier=1, max=30),
            retry=retry_if_exception_type((httpx.ConnectError, httpx.TimeoutException)),
            reraise=True,
        )
        async def _request():
            response = await self._client.get(url, **kwargs)
            logger.debug("github.request", url=url, status_code=response.status_code)
            return response

        return await _request()

    async def _get_checked(self, stage: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._get(url, **kwargs)
        except httpx.HTTPError as e:
            raise ContentServiceError(stage, None, str(e) or type(e).__name__) from e
        if response.is_success:
            return response
        raise ContentServiceError(stage, response.status_code, response.text or response.reason_phrase)

    async def _get_json(self, stage: str, url: str, **kwargs) -> Any:
        response = await self._get_checked(stage, url, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise ContentServiceError(stage, response.status_code, f"Invalid JSON payload: {e}") from e

    def _api(self, path: str) -> str:
        return f"{self.settings.GITHUB_API_URL}{path}"

    async def list_directories(self, owner: str, repo: str, path: str) -> List[Dict[str, Any]]:
        entries = await self._get_json("contents", self._api(f"/repos/{owner}/{repo}/contents/{path}"))
        if not isinstance(entries, list):
            return []
        return [
            {"name": e.get("name"), "type": e.get("type")}
            for e in entries
            if isinstance(e, dict)
        ]

    async def resolve_branch_tree_root(self, owner: str, repo: str, branch: str) -> str:
        body = await self._get_json(
            "branch", self._api(f"/repos/{owner}/{repo}/branches/{quote(branch, safe='')}")
        )
        try:
            tree_sha = body["commit"]["commit"]["tree"]["sha"]
        except (KeyError, TypeError):
            tree_sha = None
        if not tree_sha:
            raise ContentServiceError("branch", None, message="Could not resolve branch tree SHA.")
        return tree_sha

    async def list_tree_recursive(self, owner: str, repo: str, tree_id: str) -> List[Dict[str, Any]]:
        body = await self._get_json(
            "trees",
            self._api(f"/repos/{owner}/{repo}/git/trees/{tree_id}"),
            params={"recursive": "1"},
        )
        if not isinstance(body, dict):
            return []
        if body.get("truncated"):
            logger.warning("github.tree_truncated", owner=owner, repo=repo, tree_id=tree_id)
        return [
            {"path": it.get("path"), "type": it.get("type")}
            for it in (body.get("tree") or [])
            if isinstance(it, dict)
        ]

    async def fetch_raw_file(self, owner: str, repo: str, branch: str, path: str) -> bytes:
        url = f"{self.settings.GITHUB_RAW_URL}/{owner}/{repo}/{quote(branch, safe='')}/{quote(path)}"
        response = await self._get_checked("raw", url)
        return response.content
