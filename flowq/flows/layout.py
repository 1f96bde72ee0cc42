"""
Fallback grid layout.

Generated positions are kept whenever they are usable. When two nodes land
on the same rounded point, or a coordinate is missing/NaN, every node is
re-placed on a fixed grid: one column per node type, one row per node in
manifest order.
"""

from __future__ import annotations

import math

from flowq.config import LAYOUT_X_GAP, LAYOUT_Y_GAP
from flowq.flows.models import FlowManifest, FlowNode, Position
from flowq.observability.logging import get_logger
from flowq.observability.structured import EventType, get_event_logger

logger = get_logger(__name__)

OTHER_COLUMN = "other"

LAYOUT_COLUMNS: tuple[str, ...] = (
    "trigger",
    "condition",
    "delay",
    "action",
    OTHER_COLUMN,
)


def _round_half_up(value: float) -> int:
    # Generator-side rounding: 0.5 -> 1, -0.5 -> 0 (not banker's rounding)
    return math.floor(value + 0.5)


def _position_key(position: Position) -> tuple[int, int]:
    return _round_half_up(position.x), _round_half_up(position.y)


def requires_fallback_layout(manifest: FlowManifest) -> bool:
    """True if any position is missing/NaN or two nodes share a rounded point."""
    if any(node.position is None or node.position.is_missing for node in manifest.nodes):
        return True

    seen: set[tuple[int, int]] = set()
    for node in manifest.nodes:
        key = _position_key(node.position)
        if key in seen:
            return True
        seen.add(key)
    return False


def column_for(node: FlowNode) -> str:
    return node.type if node.type in LAYOUT_COLUMNS else OTHER_COLUMN


def apply_fallback_layout(
    manifest: FlowManifest,
    x_gap: int = LAYOUT_X_GAP,
    y_gap: int = LAYOUT_Y_GAP,
) -> FlowManifest:
    """
    Re-place nodes on the type-column grid if the current layout is degenerate.

    Deterministic: depends only on node types and manifest order.

    Returns:
        New manifest (positions untouched when the layout is usable)

    Side Effects:
        - Logs a layout_fallback_applied event when the grid is used
    """
    result = manifest.model_copy(deep=True)
    if not requires_fallback_layout(result):
        return result

    columns: dict[str, list[FlowNode]] = {key: [] for key in LAYOUT_COLUMNS}
    for node in result.nodes:
        columns[column_for(node)].append(node)

    for column_index, key in enumerate(LAYOUT_COLUMNS):
        for row_index, node in enumerate(columns[key]):
            node.position = Position(x=column_index * x_gap, y=row_index * y_gap)

    logger.debug("Applied fallback layout to %d node(s) in %r", len(result.nodes), result.name)
    get_event_logger().log_event(
        EventType.LAYOUT_FALLBACK_APPLIED,
        flow=result.name,
        nodes=len(result.nodes),
        columns={key: len(nodes) for key, nodes in columns.items() if nodes},
    )
    return result
