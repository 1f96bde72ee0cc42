"""
Consent injection - the compliance rewrite pass.

Every marketing email must sit behind a consent guard. For each marketing
send_email action whose direct predecessors include no guard, a locked
"Requires consent" condition is spliced in front of it: incoming edges are
retargeted to the guard and a guard -> action edge is added.

Only direct predecessors are inspected here. This pass is a repair for the
common generator output (guard immediately before the email) and must not
double-inject; the transitive check is the validator's job.
"""

from __future__ import annotations

from typing import Any

from flowq.config import CONSENT_NODE_LABEL, CONSENT_NODE_X_OFFSET
from flowq.flows.consent import ConsentGuardPolicy, get_default_policy
from flowq.flows.models import FlowEdge, FlowManifest, FlowNode, NodeType, Position
from flowq.observability.logging import get_logger
from flowq.observability.structured import get_event_logger

logger = get_logger(__name__)


def consent_guard_payload() -> dict[str, Any]:
    """data/config of a synthesized guard. locked marks it as system-owned."""
    return {
        "locked": True,
        "field": "marketingSubscribed",
        "operator": "equals",
        "value": True,
    }


def _unique_id(base: str, taken: set[str]) -> str:
    """base, or base-2, base-3, ... whichever is not yet taken."""
    candidate = base
    suffix = 2
    while candidate in taken:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate


def create_consent_node(email_node: FlowNode, node_id: str | None = None) -> FlowNode:
    """Build the guard placed in front of email_node, offset to its left."""
    x = 0.0
    y = 0.0
    if email_node.position is not None:
        x = email_node.position.x if email_node.position.x is not None else 0.0
        y = email_node.position.y if email_node.position.y is not None else 0.0

    return FlowNode(
        id=node_id or f"{email_node.id}-consent",
        type=NodeType.CONDITION,
        label=CONSENT_NODE_LABEL,
        position=Position(x=x - CONSENT_NODE_X_OFFSET, y=y),
        data=consent_guard_payload(),
        config=consent_guard_payload(),
    )


def has_consent_parent(
    manifest: FlowManifest,
    node_id: str,
    policy: ConsentGuardPolicy | None = None,
) -> bool:
    """True if any direct predecessor of node_id is a consent guard."""
    policy = policy or get_default_policy()
    nodes_by_id = manifest.nodes_by_id()
    return any(
        policy.is_consent_guard(nodes_by_id.get(edge.source_id))
        for edge in manifest.edges
        if edge.target_id == node_id
    )


def ensure_marketing_consent(
    manifest: FlowManifest,
    policy: ConsentGuardPolicy | None = None,
) -> FlowManifest:
    """
    Put a consent guard directly in front of every unguarded marketing email.

    Idempotent: the synthesized guard is recognized by the policy (locked
    marker and label), so a second run leaves the manifest unchanged.

    Returns:
        New manifest; the input is not modified

    Side Effects:
        - Logs a consent_guard_injected event per synthesized guard
    """
    policy = policy or get_default_policy()
    result = manifest.model_copy(deep=True)
    taken_ids = result.node_ids()
    taken_edge_ids = {edge.id for edge in result.edges}

    # Snapshot: guards appended below are conditions, never visited as emails
    for node in list(result.nodes):
        if not node.is_marketing_email:
            continue

        if has_consent_parent(result, node.id, policy):
            continue

        guard = create_consent_node(node, _unique_id(f"{node.id}-consent", taken_ids))
        result.nodes.append(guard)
        taken_ids.add(guard.id)

        for edge in result.edges:
            if edge.target_id == node.id:
                edge.target_id = guard.id

        edge_id = _unique_id(f"{guard.id}-edge", taken_edge_ids)
        taken_edge_ids.add(edge_id)
        result.edges.append(
            FlowEdge(
                id=edge_id,
                source_id=guard.id,
                target_id=node.id,
                label=CONSENT_NODE_LABEL,
            )
        )

        logger.info("Injected consent guard %s before marketing email %s", guard.id, node.id)
        get_event_logger().consent_guard_injected(result.name, node_id=node.id, guard_id=guard.id)

    return result
