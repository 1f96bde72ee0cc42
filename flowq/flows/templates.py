"""
Matching generated email templates to email action nodes.

The generator returns templates as a list parallel to the manifest's email
actions, but the counts do not always agree. Extra templates are dropped and
surplus email nodes keep whatever templateId they already had, which leaves
them for the validator to flag.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from flowq.flows.models import EmailType, FlowManifest
from flowq.observability.logging import get_logger
from flowq.observability.structured import EventType, get_event_logger

logger = get_logger(__name__)


class GeneratedTemplate(BaseModel):
    """Starter email template returned alongside a generated manifest."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    name: str
    email_type: EmailType = Field(..., alias="emailType")
    mjml: str


def reconcile_templates(
    manifest: FlowManifest,
    templates: Sequence[GeneratedTemplate],
) -> list[GeneratedTemplate]:
    """
    Trim templates to the number of email action nodes.

    Side Effects:
        - Logs a warning when the counts disagree
    """
    email_count = len(manifest.email_nodes())

    if len(templates) > email_count:
        logger.warning(
            "Trimming %d extra template(s) from generated flow %r",
            len(templates) - email_count,
            manifest.name,
        )
    elif len(templates) < email_count:
        logger.warning(
            "Generated flow %r has %d template(s) for %d email node(s); some nodes will remain without templates",
            manifest.name,
            len(templates),
            email_count,
        )

    if len(templates) != email_count:
        get_event_logger().log_event(
            EventType.TEMPLATES_MISMATCH,
            flow=manifest.name,
            templates=len(templates),
            email_nodes=email_count,
        )

    return list(templates[:email_count])


def assign_template_ids(
    manifest: FlowManifest,
    template_ids: Sequence[str],
    email_types: Sequence[str] = (),
) -> FlowManifest:
    """
    Write saved template ids onto email action nodes in manifest order.

    When counts differ only the first min(nodes, ids) nodes are assigned.
    emailType is filled from email_types only where a node has none.

    Returns:
        New manifest; the input is not modified
    """
    result = manifest.model_copy(deep=True)
    email_nodes = result.email_nodes()
    mapped = min(len(email_nodes), len(template_ids))

    if len(email_nodes) != len(template_ids):
        logger.warning(
            "Template/email mismatch in %r. Mapping %d template(s) across %d email node(s)",
            result.name,
            mapped,
            len(email_nodes),
        )

    for index, node in enumerate(email_nodes[:mapped]):
        data = dict(node.data or {})
        data["templateId"] = template_ids[index]
        if data.get("emailType") is None and index < len(email_types):
            data["emailType"] = email_types[index]
        node.data = data

    return result
