"""
Fixed pass pipelines for generated flows.

Every pass is a pure FlowManifest -> FlowManifest transform, so the order
below is the only ordering that matters:

    default positions -> consent injection -> fallback layout -> edge pruning

Consent injection runs before layout so synthesized guards are placed on the
grid with everything else. Pruning runs last so edges rewired by injection
are checked too. Template assignment and id remapping happen once the
storefront has saved the templates (prepare_for_persistence).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from flowq.flows.consent import ConsentGuardPolicy
from flowq.flows.generation import parse_generation_response
from flowq.flows.identifiers import remap_manifest_identifiers
from flowq.flows.injection import ensure_marketing_consent
from flowq.flows.layout import apply_fallback_layout
from flowq.flows.models import FlowManifest, ValidationResult
from flowq.flows.repair import ensure_default_positions, prune_invalid_edges
from flowq.flows.templates import GeneratedTemplate, assign_template_ids, reconcile_templates
from flowq.flows.validate import validate_flow
from flowq.observability.logging import get_logger

logger = get_logger(__name__)

ManifestPass = Callable[[FlowManifest], FlowManifest]


def normalization_passes(policy: ConsentGuardPolicy | None = None) -> list[ManifestPass]:
    """The normalization passes in pipeline order, bound to policy."""
    return [
        ensure_default_positions,
        lambda manifest: ensure_marketing_consent(manifest, policy=policy),
        apply_fallback_layout,
        prune_invalid_edges,
    ]


def normalize_generated_manifest(
    manifest: FlowManifest,
    policy: ConsentGuardPolicy | None = None,
) -> FlowManifest:
    """Run the normalization pipeline. The input is not modified."""
    result = manifest
    for manifest_pass in normalization_passes(policy):
        result = manifest_pass(result)
    return result


def prepare_for_persistence(
    manifest: FlowManifest,
    template_ids: Sequence[str] = (),
    email_types: Sequence[str] = (),
    id_factory: Callable[[], str] | None = None,
) -> FlowManifest:
    """Assign saved template ids (if any), then regenerate every identifier."""
    result = manifest
    if template_ids:
        result = assign_template_ids(result, template_ids, email_types)
    return remap_manifest_identifiers(result, id_factory=id_factory)


@dataclass
class CompiledFlow:
    """Result of compiling a generator response into a persistable manifest."""

    manifest: FlowManifest
    templates: list[GeneratedTemplate] = field(default_factory=list)
    validation: ValidationResult | None = None

    @property
    def ok(self) -> bool:
        return self.validation is not None and self.validation.ok


def compile_generated_flow(
    content: str | None,
    template_ids: Sequence[str] | None = None,
    policy: ConsentGuardPolicy | None = None,
    id_factory: Callable[[], str] | None = None,
) -> CompiledFlow:
    """
    Turn raw generator output into a normalized, remapped manifest.

    Args:
        content: Raw generator response text
        template_ids: Ids of the saved templates, parallel to the reconciled
                      templates. None when templates are not saved yet.
        policy: Consent-guard policy for injection and validation
        id_factory: Id generator for the remap (defaults to uuid4)

    Raises:
        FlowGenerationError: content is not a usable generator response
    """
    response = parse_generation_response(content)
    manifest = normalize_generated_manifest(response.manifest, policy=policy)
    templates = reconcile_templates(manifest, response.templates)

    email_types = [template.email_type for template in templates]
    manifest = prepare_for_persistence(
        manifest,
        template_ids=template_ids or (),
        email_types=email_types,
        id_factory=id_factory,
    )

    validation = validate_flow(manifest, policy=policy)
    logger.info(
        "Compiled flow %r: %d node(s), %d edge(s), %d template(s), ok=%s",
        manifest.name,
        len(manifest.nodes),
        len(manifest.edges),
        len(templates),
        validation.ok,
    )
    return CompiledFlow(manifest=manifest, templates=templates, validation=validation)
