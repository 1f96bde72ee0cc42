"""Activation gate: the last check before a flow goes live."""

from __future__ import annotations

from flowq.flows.consent import ConsentGuardPolicy
from flowq.flows.errors import FlowActivationError
from flowq.flows.models import FlowManifest, ValidationResult
from flowq.flows.validate import validate_flow
from flowq.observability.logging import get_logger
from flowq.observability.structured import EventType, get_event_logger

logger = get_logger(__name__)

CONFIRMATION_REQUIRED_MESSAGE = "Activation requires explicit confirmation."
VALIDATION_FAILED_MESSAGE = "Flow failed validation and cannot be activated."


def ensure_activatable(
    manifest: FlowManifest,
    confirmed: bool = True,
    policy: ConsentGuardPolicy | None = None,
) -> ValidationResult:
    """
    Refuse activation unless the caller confirmed and the manifest validates.

    Returns:
        The passing ValidationResult (info issues are still worth showing)

    Raises:
        FlowActivationError: not confirmed, or validation found errors
            (the error carries every issue, not only the errors)
    """
    if not confirmed:
        get_event_logger().log_event(
            EventType.ACTIVATION_REFUSED, flow=manifest.name, reason="not_confirmed"
        )
        raise FlowActivationError(CONFIRMATION_REQUIRED_MESSAGE)

    result = validate_flow(manifest, policy=policy)
    if not result.ok:
        logger.warning(
            "Refusing activation of %r: %d error issue(s)", manifest.name, len(result.errors)
        )
        get_event_logger().log_event(
            EventType.ACTIVATION_REFUSED,
            flow=manifest.name,
            reason="validation_failed",
            errors=len(result.errors),
        )
        raise FlowActivationError(VALIDATION_FAILED_MESSAGE, issues=result.issues)

    return result
