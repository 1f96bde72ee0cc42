"""FlowQ - compile and validate marketing automation flows"""

from __future__ import annotations

__version__ = "0.1.0"


# Lazy imports keep `import flowq` cheap for the CLI and config consumers
def __getattr__(name: str):
    if name in ("FlowManifest", "FlowNode", "FlowEdge", "FlowIssue", "ValidationResult"):
        from flowq.flows import models

        return getattr(models, name)

    if name == "validate_flow":
        from flowq.flows.validate import validate_flow

        return validate_flow

    if name in ("normalize_generated_manifest", "prepare_for_persistence", "compile_generated_flow"):
        from flowq.flows import pipeline

        return getattr(pipeline, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "FlowManifest",
    "FlowNode",
    "FlowEdge",
    "FlowIssue",
    "ValidationResult",
    "validate_flow",
    "normalize_generated_manifest",
    "prepare_for_persistence",
    "compile_generated_flow",
]
