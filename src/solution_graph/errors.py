"""Exception taxonomy for solution graph requests."""

from __future__ import annotations

from typing import Any, Dict, Optional


class ContentServiceError(Exception):
    """
    Transport or status failure reported by the content-hosting service.

    Raised for directory listing, branch resolution, tree listing and raw
    file fetches. The orchestrator treats the first three stages as fatal
    and skips the file for the ``raw`` stage.
    """

    STAGE_LABELS = {
        "contents": "GitHub",
        "branch": "Branch",
        "trees": "Trees",
        "raw": "Raw",
    }

    def __init__(
        self,
        stage: str,
        status_code: Optional[int] = None,
        detail: str = "",
        message: Optional[str] = None,
    ):
        self.stage = stage
        self.status_code = status_code
        self.detail = detail
        if message is None:
            label = self.STAGE_LABELS.get(stage, stage.capitalize())
            if status_code is None:
                message = f"{label} API error: {detail}"
            else:
                message = f"{label} API error {status_code}: {detail}"
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "error",
            "detail": {
                "stage": self.stage,
                "status_code": self.status_code,
                "message": self.message,
            },
        }


class ArtifactParseError(Exception):
    """Raw file content at ``path`` is not a JSON document."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not parse {path}: {reason}")


class InvalidRepositoryError(ValueError):
    """Repository reference is not of the form ``owner/repo``."""
