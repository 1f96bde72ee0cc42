"""Tests for flow manifest models (aliases, extras, helpers)"""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from flowq.flows.models import (
    FlowEdge,
    FlowIssue,
    FlowManifest,
    FlowNode,
    IssueSeverity,
    NodeType,
    Position,
    ValidationResult,
)


class TestFlowManifestParsing:
    """Manifests arrive as camelCase JSON from the generator and the storefront"""

    def test_parses_camel_case_edges(self):
        manifest = FlowManifest.model_validate(
            {
                "name": "Welcome",
                "nodes": [
                    {"id": "t", "type": "trigger", "label": "Signed up", "position": {"x": 0, "y": 0}},
                    {"id": "a", "type": "action", "label": "Send", "position": {"x": 300, "y": 0}},
                ],
                "edges": [{"id": "e", "sourceId": "t", "targetId": "a", "label": None}],
            }
        )

        assert manifest.edges[0].source_id == "t"
        assert manifest.edges[0].target_id == "a"
        assert manifest.nodes[0].type == NodeType.TRIGGER

    def test_snake_case_names_also_accepted(self):
        edge = FlowEdge(id="e", source_id="a", target_id="b")
        assert edge.source_id == "a"

    def test_dump_uses_wire_names(self):
        manifest = FlowManifest(
            name="Flow",
            nodes=[FlowNode(id="a", type="trigger", label="Start", position=Position(x=1, y=2))],
            edges=[FlowEdge(id="e", source_id="a", target_id="a")],
        )

        wire = manifest.to_wire()

        assert wire["edges"][0] == {"id": "e", "sourceId": "a", "targetId": "a"}
        assert wire["nodes"][0]["type"] == "trigger"
        assert "data" not in wire["nodes"][0]

    def test_unknown_node_type_rejected(self):
        with pytest.raises(ValidationError):
            FlowNode(id="x", type="loop", label="Loop")

    def test_generator_extra_keys_preserved(self):
        node = FlowNode.model_validate(
            {"id": "a", "type": "delay", "label": "Wait", "durationHours": 24}
        )
        assert node.model_dump()["durationHours"] == 24

    def test_null_label_becomes_empty_string(self):
        node = FlowNode.model_validate({"id": "a", "type": "condition", "label": None})
        assert node.label == ""


class TestFlowNodeHelpers:
    """Convenience accessors over the free-form data payload"""

    def test_marketing_email(self):
        node = FlowNode(
            id="a",
            type="action",
            data={"action": "send_email", "emailType": "marketing", "templateId": "tpl"},
        )
        assert node.is_email_action
        assert node.is_marketing_email
        assert node.template_id == "tpl"

    def test_transactional_email_is_not_marketing(self):
        node = FlowNode(id="a", type="action", data={"action": "send_email", "emailType": "transactional"})
        assert node.is_email_action
        assert not node.is_marketing_email

    def test_send_email_on_condition_is_not_an_email_action(self):
        node = FlowNode(id="a", type="condition", data={"action": "send_email"})
        assert not node.is_email_action

    def test_missing_data(self):
        node = FlowNode(id="a", type="action")
        assert node.action is None
        assert node.email_type is None
        assert not node.is_email_action


class TestPosition:
    def test_complete_position(self):
        assert not Position(x=10, y=20).is_missing

    def test_missing_coordinate(self):
        assert Position(x=10).is_missing

    def test_nan_coordinate(self):
        assert Position(x=math.nan, y=0).is_missing


class TestValidationResult:
    def test_issue_wire_name(self):
        issue = FlowIssue(node_id="a", severity=IssueSeverity.ERROR, message="bad")
        assert issue.model_dump(by_alias=True) == {"nodeId": "a", "severity": "error", "message": "bad"}

    def test_errors_and_infos(self):
        result = ValidationResult(
            ok=False,
            issues=[
                FlowIssue(node_id="a", severity="error", message="bad"),
                FlowIssue(severity="info", message="note"),
            ],
        )
        assert [i.node_id for i in result.errors] == ["a"]
        assert [i.message for i in result.infos] == ["note"]
