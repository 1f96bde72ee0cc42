"""
Pre-activation validation of a flow manifest.

Read-only. Business-rule problems are returned as FlowIssue data and never
raised; the activation caller blocks on errors and shows the rest.

Rules:
1. Every send_email action references a saved template (error)
2. Every marketing send_email action has a consent guard somewhere upstream (error)
3. Any manifest with email actions gets one runtime-suppression notice (info)

Cycles, unreachable nodes and trigger count are not checked.
"""

from __future__ import annotations

from flowq.flows.ancestors import build_incoming_map, collect_ancestors
from flowq.flows.consent import ConsentGuardPolicy, get_default_policy
from flowq.flows.models import FlowIssue, FlowManifest, IssueSeverity, ValidationResult
from flowq.observability.structured import get_event_logger

MISSING_TEMPLATE_MESSAGE = "Email action must reference a saved template."
MISSING_CONSENT_MESSAGE = (
    "Marketing email requires a subscription filter (marketingSubscribed === true) "
    "on at least one upstream condition."
)
SUPPRESSION_NOTICE = (
    "Email actions automatically skip recipients flagged as bounced or complained at runtime."
)


def validate_flow(
    manifest: FlowManifest,
    policy: ConsentGuardPolicy | None = None,
) -> ValidationResult:
    """
    Check a manifest against the activation rules.

    Args:
        manifest: Manifest to check (not modified)
        policy: Consent-guard policy; defaults to the heuristic policy

    Returns:
        ValidationResult with ok=False if any error issue was found

    Side Effects:
        - Logs a validation_ok / validation_failed event
    """
    policy = policy or get_default_policy()
    issues: list[FlowIssue] = []
    nodes_by_id = manifest.nodes_by_id()
    incoming = build_incoming_map(manifest)

    email_nodes = manifest.email_nodes()
    for node in email_nodes:
        if not node.template_id:
            issues.append(
                FlowIssue(node_id=node.id, severity=IssueSeverity.ERROR, message=MISSING_TEMPLATE_MESSAGE)
            )

        if node.is_marketing_email:
            ancestors = collect_ancestors(node.id, incoming, nodes_by_id)
            if not any(policy.is_consent_guard(ancestor) for ancestor in ancestors):
                issues.append(
                    FlowIssue(node_id=node.id, severity=IssueSeverity.ERROR, message=MISSING_CONSENT_MESSAGE)
                )

    if email_nodes:
        issues.append(FlowIssue(severity=IssueSeverity.INFO, message=SUPPRESSION_NOTICE))

    result = ValidationResult(
        ok=not any(issue.severity == IssueSeverity.ERROR for issue in issues),
        issues=issues,
    )
    get_event_logger().validation_result(
        manifest.name, ok=result.ok, errors=len(result.errors), infos=len(result.infos)
    )
    return result
