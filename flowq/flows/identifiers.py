"""
Identifier remapping before persistence.

The generator reuses ids across calls (two attempts both returning
"node-1"), so every node and edge id is replaced with a fresh UUID before a
manifest is stored.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable

from flowq.flows.models import FlowManifest
from flowq.observability.structured import EventType, get_event_logger


def _new_id() -> str:
    return str(uuid.uuid4())


def remap_manifest_identifiers(
    manifest: FlowManifest,
    id_factory: Callable[[], str] | None = None,
) -> FlowManifest:
    """
    Replace all node and edge ids, rewriting edge endpoints consistently.

    Endpoints that name no node keep their original value (pruning is a
    separate pass).

    Args:
        manifest: Manifest to remap (not modified)
        id_factory: Zero-arg callable producing ids. Defaults to uuid4 strings.

    Returns:
        New manifest with fresh ids
    """
    make_id = id_factory or _new_id
    result = manifest.model_copy(deep=True)

    node_id_map: dict[str, str] = {}
    for node in result.nodes:
        new_id = make_id()
        node_id_map[node.id] = new_id
        node.id = new_id

    for edge in result.edges:
        edge.id = make_id()
        edge.source_id = node_id_map.get(edge.source_id, edge.source_id)
        edge.target_id = node_id_map.get(edge.target_id, edge.target_id)

    get_event_logger().log_event(
        EventType.IDS_REMAPPED,
        flow=result.name,
        nodes=len(result.nodes),
        edges=len(result.edges),
    )
    return result
