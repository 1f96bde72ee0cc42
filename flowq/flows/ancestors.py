"""
Ancestor resolution over a flow manifest.

Walks edges backwards from a node to every node with a directed path to it.
Used by the validator to decide whether a consent guard sits anywhere
upstream of a marketing email.
"""

from __future__ import annotations

from flowq.flows.models import FlowManifest, FlowNode


def build_incoming_map(manifest: FlowManifest) -> dict[str, list[str]]:
    """Map each target id to the source ids of its incoming edges (edge order kept)."""
    incoming: dict[str, list[str]] = {}
    for edge in manifest.edges:
        incoming.setdefault(edge.target_id, []).append(edge.source_id)
    return incoming


def collect_ancestors(
    node_id: str,
    incoming: dict[str, list[str]],
    nodes_by_id: dict[str, FlowNode],
) -> list[FlowNode]:
    """
    Collect every node that can reach node_id.

    Stack-based DFS starting from the direct predecessors. Each id is expanded
    at most once, so cycles terminate. The target itself is never returned,
    even when a cycle leads back to it. Ids without a node (dangling edges)
    are skipped and not expanded further.

    Side Effects:
        None (pure function)
    """
    visited: set[str] = {node_id}
    ancestors: list[FlowNode] = []
    stack = list(incoming.get(node_id, []))

    while stack:
        current_id = stack.pop()
        if current_id in visited:
            continue
        visited.add(current_id)

        current = nodes_by_id.get(current_id)
        if current is None:
            continue

        ancestors.append(current)
        for next_id in incoming.get(current_id, []):
            if next_id not in visited:
                stack.append(next_id)

    return ancestors


def ancestors_of(manifest: FlowManifest, node_id: str) -> list[FlowNode]:
    """All ancestors of node_id in manifest."""
    return collect_ancestors(node_id, build_incoming_map(manifest), manifest.nodes_by_id())
