"""Exceptions raised at the edges of the flow compiler.

The rewrite passes and the validator never raise: passes repair, the
validator reports issues as data. These cover the two places where the
caller must stop: unusable generator output and a refused activation.
"""

from __future__ import annotations

from flowq.flows.models import FlowIssue


class FlowError(Exception):
    """Base class for flow compiler errors."""

    pass


class FlowGenerationError(FlowError):
    """Raised when the generator's response cannot be turned into a manifest."""

    pass


class FlowActivationError(FlowError):
    """Raised when a flow must not be activated. Carries the blocking issues."""

    def __init__(self, message: str, issues: list[FlowIssue] | None = None):
        super().__init__(message)
        self.issues: list[FlowIssue] = list(issues or [])
