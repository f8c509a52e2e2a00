"""Content source contract consumed by the orchestrator."""

from __future__ import annotations

from typing import Any, Protocol


class ContentSource(Protocol):
    """Remote content-hosting service holding the solution repository.

    Every call may raise ``ContentServiceError``.
    """

    async def list_directories(self, owner: str, repo: str, path: str) -> list[dict[str, Any]]:
        """Return ``[{name, type}, ...]`` entries directly under ``path``."""

    async def resolve_branch_tree_root(self, owner: str, repo: str, branch: str) -> str:
        """Resolve a branch name to an immutable tree id."""

    async def list_tree_recursive(self, owner: str, repo: str, tree_id: str) -> list[dict[str, Any]]:
        """Return a flat ``[{path, type}, ...]`` listing of the whole tree."""

    async def fetch_raw_file(self, owner: str, repo: str, branch: str, path: str) -> bytes:
        """Return raw file content."""
