"""
Marketing flow compiler and validator.

Rewrite passes (pure, manifest in -> manifest out), the pre-activation
validator, and the consent-guard policies they share.
"""

from flowq.flows.activation import ensure_activatable
from flowq.flows.ancestors import ancestors_of, build_incoming_map, collect_ancestors
from flowq.flows.consent import (
    ConsentGuardPolicy,
    HeuristicConsentPolicy,
    MarkerConsentPolicy,
    get_default_policy,
    set_default_policy,
)
from flowq.flows.errors import FlowActivationError, FlowError, FlowGenerationError
from flowq.flows.generation import GenerationResponse, parse_generation_response
from flowq.flows.identifiers import remap_manifest_identifiers
from flowq.flows.injection import create_consent_node, ensure_marketing_consent
from flowq.flows.layout import apply_fallback_layout, requires_fallback_layout
from flowq.flows.models import (
    EmailType,
    FlowEdge,
    FlowIssue,
    FlowManifest,
    FlowNode,
    IssueSeverity,
    NodeAction,
    NodeType,
    Position,
    ValidationResult,
)
from flowq.flows.pipeline import (
    CompiledFlow,
    compile_generated_flow,
    normalization_passes,
    normalize_generated_manifest,
    prepare_for_persistence,
)
from flowq.flows.repair import ensure_default_positions, prune_invalid_edges
from flowq.flows.templates import GeneratedTemplate, assign_template_ids, reconcile_templates
from flowq.flows.validate import validate_flow

__all__ = [
    # Models
    "EmailType",
    "FlowEdge",
    "FlowIssue",
    "FlowManifest",
    "FlowNode",
    "IssueSeverity",
    "NodeAction",
    "NodeType",
    "Position",
    "ValidationResult",
    # Consent policies
    "ConsentGuardPolicy",
    "HeuristicConsentPolicy",
    "MarkerConsentPolicy",
    "get_default_policy",
    "set_default_policy",
    # Graph queries
    "ancestors_of",
    "build_incoming_map",
    "collect_ancestors",
    # Passes
    "apply_fallback_layout",
    "assign_template_ids",
    "create_consent_node",
    "ensure_default_positions",
    "ensure_marketing_consent",
    "prune_invalid_edges",
    "reconcile_templates",
    "remap_manifest_identifiers",
    "requires_fallback_layout",
    # Generation / pipelines
    "CompiledFlow",
    "GeneratedTemplate",
    "GenerationResponse",
    "compile_generated_flow",
    "normalization_passes",
    "normalize_generated_manifest",
    "parse_generation_response",
    "prepare_for_persistence",
    # Validation / activation
    "ensure_activatable",
    "validate_flow",
    # Errors
    "FlowActivationError",
    "FlowError",
    "FlowGenerationError",
]
