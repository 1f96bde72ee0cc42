"""
Flow manifest domain models (Pydantic v2).

A manifest is the complete node/edge graph of one marketing automation. The
wire format is camelCase (sourceId, targetId, nodeId) because manifests are
exchanged with the generator and the storefront as JSON; Python attributes
are snake_case and either spelling is accepted on input.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NodeType(str, Enum):
    """Closed set of node kinds in a flow graph."""

    TRIGGER = "trigger"
    ACTION = "action"
    CONDITION = "condition"
    DELAY = "delay"


class NodeAction(str, Enum):
    """Values of data.action on action nodes."""

    SEND_EMAIL = "send_email"
    WEBHOOK = "webhook"
    TAG_CUSTOMER = "tag_customer"


class EmailType(str, Enum):
    """Purpose of an email action; marketing emails need a consent guard."""

    MARKETING = "marketing"
    TRANSACTIONAL = "transactional"


class IssueSeverity(str, Enum):
    """Severity of a validation finding."""

    ERROR = "error"  # Blocks activation
    WARNING = "warning"  # Reserved, no rule emits it yet
    INFO = "info"  # Reminder of runtime behavior


class Position(BaseModel):
    """Canvas coordinates. Presentation only, never semantically meaningful."""

    model_config = ConfigDict(frozen=False)

    x: float | None = None
    y: float | None = None

    @property
    def is_missing(self) -> bool:
        return any(v is None or not math.isfinite(v) for v in (self.x, self.y))


class FlowNode(BaseModel):
    """
    A trigger, action, condition or delay step.

    Extra keys produced by the generator are preserved so a manifest survives
    a round trip through the compiler unchanged apart from the rewrites.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, extra="allow")

    id: str = Field(..., description="Opaque identifier, regenerated on each persistence cycle")
    type: NodeType
    label: str = Field(default="")
    position: Position | None = Field(default=None)
    config: dict[str, Any] | None = Field(default=None)
    data: dict[str, Any] | None = Field(default=None)

    @field_validator("label", mode="before")
    @classmethod
    def _label_not_null(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def action(self) -> str | None:
        return (self.data or {}).get("action")

    @property
    def email_type(self) -> str | None:
        return (self.data or {}).get("emailType")

    @property
    def template_id(self) -> str | None:
        return (self.data or {}).get("templateId")

    @property
    def is_email_action(self) -> bool:
        return self.type == NodeType.ACTION and self.action == NodeAction.SEND_EMAIL

    @property
    def is_marketing_email(self) -> bool:
        return self.is_email_action and self.email_type == EmailType.MARKETING


class FlowEdge(BaseModel):
    """Directed edge. Parallel edges are allowed."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    source_id: str = Field(..., alias="sourceId")
    target_id: str = Field(..., alias="targetId")
    label: str | None = Field(default=None)


class FlowManifest(BaseModel):
    """
    The whole automation: a name, its nodes and its edges.

    Every edge endpoint should reference an existing node id. That is enforced
    by the edge-pruning pass, not by construction, because generator output
    is accepted as-is and repaired afterwards.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="")
    nodes: list[FlowNode] = Field(default_factory=list)
    edges: list[FlowEdge] = Field(default_factory=list)

    def nodes_by_id(self) -> dict[str, FlowNode]:
        return {node.id: node for node in self.nodes}

    def node_ids(self) -> set[str]:
        return {node.id for node in self.nodes}

    def email_nodes(self) -> list[FlowNode]:
        """Email action nodes in manifest order."""
        return [node for node in self.nodes if node.is_email_action]

    def to_wire(self) -> dict[str, Any]:
        """camelCase JSON-ready dict, the shape the storefront persists."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FlowIssue(BaseModel):
    """A validation finding. nodeId is absent for manifest-level issues."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    node_id: str | None = Field(default=None, alias="nodeId")
    severity: IssueSeverity
    message: str


class ValidationResult(BaseModel):
    """Outcome of validate_flow. ok is true iff no issue is an error."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    issues: list[FlowIssue] = Field(default_factory=list)

    @property
    def errors(self) -> list[FlowIssue]:
        return [issue for issue in self.issues if issue.severity == IssueSeverity.ERROR]

    @property
    def infos(self) -> list[FlowIssue]:
        return [issue for issue in self.issues if issue.severity == IssueSeverity.INFO]
