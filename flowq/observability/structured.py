"""
Structured Event Logging for FlowQ

Provides one-line JSON event logging for the flow compiler with:
- Correlation IDs (session_id + flow name)
- Event taxonomy covering the rewrite passes, validation and activation
- Sampling for INFO/DEBUG events (errors and warnings are always emitted)

Usage:
    from flowq.observability.structured import EventType, get_event_logger

    events = get_event_logger()
    events.log_event(
        EventType.CONSENT_GUARD_INJECTED,
        flow="Winback 30d",
        node_id="email-1",
        guard_id="email-1-consent",
    )

Output:
    {"ts":"2026-01-05T10:12:44.101+00:00","level":"INFO","session":"20260105_101244","event":"consent_guard_injected","flow":"Winback 30d","node_id":"email-1","guard_id":"email-1-consent"}
"""

from __future__ import annotations

import json
import logging
import random
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from flowq.config import EVENT_MAX_FIELD_CHARS, EVENT_SAMPLE_RATE_INFO

logger = logging.getLogger("flowq.structured")


class EventType(str, Enum):
    """Event taxonomy for the flow compiler"""

    # 1. Rewrite passes
    CONSENT_GUARD_INJECTED = "consent_guard_injected"
    LAYOUT_FALLBACK_APPLIED = "layout_fallback_applied"
    EDGES_PRUNED = "edges_pruned"
    IDS_REMAPPED = "ids_remapped"
    TEMPLATES_MISMATCH = "templates_mismatch"

    # 2. Generation
    GENERATION_PARSE_ERROR = "generation_parse_error"

    # 3. Validation / activation
    VALIDATION_OK = "validation_ok"
    VALIDATION_FAILED = "validation_failed"
    ACTIVATION_REFUSED = "activation_refused"


EVENT_SEVERITY = {
    EventType.CONSENT_GUARD_INJECTED: logging.INFO,
    EventType.LAYOUT_FALLBACK_APPLIED: logging.INFO,
    EventType.EDGES_PRUNED: logging.WARNING,
    EventType.IDS_REMAPPED: logging.DEBUG,
    EventType.TEMPLATES_MISMATCH: logging.WARNING,
    EventType.GENERATION_PARSE_ERROR: logging.ERROR,
    EventType.VALIDATION_OK: logging.INFO,
    EventType.VALIDATION_FAILED: logging.WARNING,
    EventType.ACTIVATION_REFUSED: logging.WARNING,
}


class SafeJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles common non-serializable types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        if hasattr(obj, "model_dump"):
            return obj.model_dump(by_alias=True, exclude_none=True)
        if hasattr(obj, "__dict__"):
            return str(obj)
        return super().default(obj)


class StructuredLogger:
    """
    Structured event logger with sampling

    Features:
    - Correlation via session_id (one compile/validate run) + flow name
    - Sampling: configurable for INFO/DEBUG, 100% for WARNING and above
    - One-line JSON output for easy parsing
    """

    def __init__(
        self,
        session_id: str | None = None,
        sample_rate_info: float = EVENT_SAMPLE_RATE_INFO,
    ):
        """
        Args:
            session_id: Unique ID for this session (e.g., "20260105_101244")
            sample_rate_info: fraction of INFO/DEBUG events to emit (0.0-1.0)
        """
        self.session_id = session_id or self._generate_session_id()
        self.sample_rate_info = sample_rate_info

    @staticmethod
    def _generate_session_id() -> str:
        """Generate session ID: YYYYMMDD_HHMMSS"""
        return datetime.now(UTC).strftime("%Y%m%d_%H%M%S")

    def _should_log(self, event_type: EventType) -> bool:
        severity = EVENT_SEVERITY.get(event_type, logging.INFO)
        if severity >= logging.WARNING:
            return True
        return random.random() < self.sample_rate_info

    def build_event(self, event_type: EventType, flow: str | None = None, **kwargs: Any) -> dict[str, Any]:
        """Assemble the event payload without emitting it.

        Side Effects:
            None (pure function)
        """
        severity = EVENT_SEVERITY.get(event_type, logging.INFO)
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": logging.getLevelName(severity),
            "session": self.session_id,
            "event": event_type.value,
        }
        if flow:
            event["flow"] = flow

        for key, value in kwargs.items():
            if isinstance(value, str) and len(value) > EVENT_MAX_FIELD_CHARS:
                event[key] = value[:EVENT_MAX_FIELD_CHARS] + "..."
            else:
                event[key] = value
        return event

    def log_event(self, event_type: EventType, flow: str | None = None, **kwargs: Any) -> None:
        """
        Log a structured event

        Args:
            event_type: Event type from EventType enum
            flow: Flow (manifest) name for correlation
            **kwargs: Additional fields for the event

        Side Effects:
            - Writes structured JSON log entry to logging system
        """
        if not self._should_log(event_type):
            return

        severity = EVENT_SEVERITY.get(event_type, logging.INFO)
        event = self.build_event(event_type, flow=flow, **kwargs)

        try:
            json_line = json.dumps(event, separators=(",", ":"), cls=SafeJSONEncoder)
        except (TypeError, ValueError) as e:
            logger.error("structured_log_error: failed to serialize event type=%s error=%s", event_type, e)
            return
        logger.log(severity, json_line)

    # Convenience methods for common events

    def consent_guard_injected(self, flow: str, node_id: str, guard_id: str) -> None:
        """Log a synthesized consent guard

        Side Effects:
            - Logs event to application logger via log_event()
        """
        self.log_event(EventType.CONSENT_GUARD_INJECTED, flow=flow, node_id=node_id, guard_id=guard_id)

    def edges_pruned(self, flow: str, removed: int, remaining: int) -> None:
        """Log dropped dangling edges

        Side Effects:
            - Logs event to application logger via log_event()
        """
        self.log_event(EventType.EDGES_PRUNED, flow=flow, removed=removed, remaining=remaining)

    def validation_result(self, flow: str, ok: bool, errors: int, infos: int) -> None:
        """Log the outcome of a validation run

        Side Effects:
            - Logs event to application logger via log_event()
        """
        event_type = EventType.VALIDATION_OK if ok else EventType.VALIDATION_FAILED
        self.log_event(event_type, flow=flow, errors=errors, infos=infos)


_global_logger: StructuredLogger | None = None


def get_event_logger(session_id: str | None = None) -> StructuredLogger:
    """
    Get or create global structured event logger

    Args:
        session_id: Optional session ID (creates new logger if provided)

    Side Effects:
        - May replace the module-level _global_logger
    """
    global _global_logger

    if session_id or _global_logger is None:
        _global_logger = StructuredLogger(session_id=session_id)

    return _global_logger
