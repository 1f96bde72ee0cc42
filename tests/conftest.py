"""
Pytest configuration for flow compiler tests

Provides manifest builders and a clean default consent policy per test
"""

from __future__ import annotations

from typing import Any

import pytest

from flowq.flows.consent import set_default_policy
from flowq.flows.models import FlowEdge, FlowManifest, FlowNode, Position


@pytest.fixture(autouse=True)
def reset_default_policy():
    """Each test starts from the heuristic default policy."""
    set_default_policy(None)
    yield
    set_default_policy(None)


@pytest.fixture
def make_node():
    """Factory: make_node("e1", "action", label=..., x=..., y=..., data=...)"""

    def _make(
        node_id: str,
        node_type: str = "action",
        label: str = "",
        x: float | None = 0,
        y: float | None = 0,
        data: dict[str, Any] | None = None,
        config: dict[str, Any] | None = None,
        with_position: bool = True,
    ) -> FlowNode:
        return FlowNode(
            id=node_id,
            type=node_type,
            label=label,
            position=Position(x=x, y=y) if with_position else None,
            data=data,
            config=config,
        )

    return _make


@pytest.fixture
def make_email(make_node):
    """Factory for send_email action nodes."""

    def _make(
        node_id: str,
        email_type: str = "marketing",
        template_id: str | None = "tpl-1",
        x: float = 0,
        y: float = 0,
    ) -> FlowNode:
        data: dict[str, Any] = {"action": "send_email", "emailType": email_type}
        if template_id is not None:
            data["templateId"] = template_id
        return make_node(node_id, "action", label=f"Send {email_type} email", x=x, y=y, data=data)

    return _make


@pytest.fixture
def make_manifest():
    """Factory: make_manifest(nodes, [("a", "b"), ("b", "c", "label")])"""

    def _make(nodes: list[FlowNode], edges: list[tuple] | None = None, name: str = "Test flow") -> FlowManifest:
        built_edges = []
        for index, edge_def in enumerate(edges or []):
            source, target = edge_def[0], edge_def[1]
            label = edge_def[2] if len(edge_def) > 2 else None
            built_edges.append(
                FlowEdge(id=f"edge-{index}", source_id=source, target_id=target, label=label)
            )
        return FlowManifest(name=name, nodes=nodes, edges=built_edges)

    return _make


@pytest.fixture
def winback_payload() -> dict[str, Any]:
    """Generator response for 'If no order in 30 days, send a winback discount'."""
    return {
        "manifest": {
            "name": "Winback 30d",
            "nodes": [
                {
                    "id": "node-1",
                    "type": "trigger",
                    "label": "No order in 30 days",
                    "position": {"x": 0, "y": 0},
                    "data": {"event": "order_placed"},
                },
                {
                    "id": "node-2",
                    "type": "condition",
                    "label": "Inactive 30 days",
                    "position": {"x": 0, "y": 0},
                    "data": {"field": "days_since_last_order", "operator": "gte", "value": 30},
                },
                {
                    "id": "node-3",
                    "type": "action",
                    "label": "Send winback discount",
                    "position": {"x": 0, "y": 0},
                    "data": {"action": "send_email", "emailType": "marketing"},
                },
            ],
            "edges": [
                {"id": "edge-1", "sourceId": "node-1", "targetId": "node-2"},
                {"id": "edge-2", "sourceId": "node-2", "targetId": "node-3"},
            ],
        },
        "templates": [
            {
                "name": "Winback",
                "emailType": "marketing",
                "mjml": "<mjml><mj-body></mj-body></mjml>",
            }
        ],
    }
