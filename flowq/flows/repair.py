"""
Mechanical repair passes for generated manifests.

Structural defects (no position, dangling edges) are fixed quietly here;
business-rule defects are left for the validator to report.
"""

from __future__ import annotations

from flowq.flows.models import FlowManifest, Position
from flowq.observability.logging import get_logger
from flowq.observability.structured import get_event_logger

logger = get_logger(__name__)


def ensure_default_positions(manifest: FlowManifest) -> FlowManifest:
    """Give every node without a position the origin (0, 0).

    Side Effects:
        None (returns a new manifest)
    """
    result = manifest.model_copy(deep=True)
    for node in result.nodes:
        if node.position is None:
            node.position = Position(x=0, y=0)
    return result


def prune_invalid_edges(manifest: FlowManifest) -> FlowManifest:
    """
    Drop edges whose source or target is empty or names no node.

    Side Effects:
        - Logs a warning (and an edges_pruned event) when edges are removed
    """
    result = manifest.model_copy(deep=True)
    node_ids = result.node_ids()
    original_count = len(result.edges)

    result.edges = [
        edge
        for edge in result.edges
        if edge.source_id and edge.target_id and edge.source_id in node_ids and edge.target_id in node_ids
    ]

    removed = original_count - len(result.edges)
    if removed:
        logger.warning("Removed %d edge(s) with missing endpoints from manifest %r", removed, result.name)
        get_event_logger().edges_pruned(result.name, removed=removed, remaining=len(result.edges))
    return result
