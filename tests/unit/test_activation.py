"""Tests for the activation gate"""

from __future__ import annotations

import pytest

from flowq.flows.activation import (
    CONFIRMATION_REQUIRED_MESSAGE,
    VALIDATION_FAILED_MESSAGE,
    ensure_activatable,
)
from flowq.flows.errors import FlowActivationError, FlowError


@pytest.fixture
def guarded_flow(make_node, make_email, make_manifest):
    return make_manifest(
        [
            make_node("t", "trigger"),
            make_node("c", "condition", label="Requires consent", data={"locked": True}),
            make_email("e1"),
        ],
        [("t", "c"), ("c", "e1")],
    )


@pytest.fixture
def unguarded_flow(make_node, make_email, make_manifest):
    return make_manifest([make_node("t", "trigger"), make_email("e1")], [("t", "e1")])


def test_valid_confirmed_flow_activates(guarded_flow):
    result = ensure_activatable(guarded_flow)

    assert result.ok
    assert len(result.infos) == 1


def test_unconfirmed_flow_refused(guarded_flow):
    with pytest.raises(FlowActivationError, match=CONFIRMATION_REQUIRED_MESSAGE) as exc_info:
        ensure_activatable(guarded_flow, confirmed=False)

    assert exc_info.value.issues == []


def test_invalid_flow_refused_with_issues(unguarded_flow):
    with pytest.raises(FlowActivationError, match=VALIDATION_FAILED_MESSAGE) as exc_info:
        ensure_activatable(unguarded_flow)

    severities = [issue.severity for issue in exc_info.value.issues]
    assert severities == ["error", "info"]
    assert exc_info.value.issues[0].node_id == "e1"


def test_activation_error_is_flow_error(unguarded_flow):
    with pytest.raises(FlowError):
        ensure_activatable(unguarded_flow)
