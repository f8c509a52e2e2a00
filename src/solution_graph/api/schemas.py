"""Pydantic request/response models for the graph API."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, StringConstraints


NodeType = Literal["solution", "source", "connector", "dependency", "table", "normalization"]
EdgeType = Literal["solution-to-connector", "ingests", "connector-to-dcr", "writes-to", "uses-norm"]
SolutionName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class SolutionListResponse(BaseModel):
    repository: str
    solutions: list[str]
    status: str


class GraphRequest(BaseModel):
    repository: str | None = None
    branch: str | None = None
    solution: SolutionName


class GraphNodeModel(BaseModel):
    id: str = Field(min_length=1)
    type: NodeType
    label: str
    meta: dict[str, Any] = Field(default_factory=dict)


class GraphEdgeModel(BaseModel):
    source: str
    target: str
    type: EdgeType


class GraphModel(BaseModel):
    nodes: list[GraphNodeModel]
    edges: list[GraphEdgeModel]


class GraphResponse(BaseModel):
    solution: str
    status: str
    files_processed: int
    ruleset_version: str
    solution_meta: dict[str, Any] | None = None
    graph: GraphModel
