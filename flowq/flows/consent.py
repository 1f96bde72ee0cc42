"""
Consent-guard classification.

Decides whether a condition node gates its downstream actions on marketing
subscription status. The generator does not emit a canonical guard shape, so
the default policy pattern-matches labels and data payloads and errs on the
side of recognizing a guard. Callers take the policy as a parameter so the
heuristic can be replaced by the typed MarkerConsentPolicy once generated
manifests carry data.kind.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

import yaml

from flowq.config import CONSENT_RULES_PATH
from flowq.flows.consent_data import (
    DATA_KEYWORDS,
    KIND_CONSENT_GUARD,
    KIND_FIELD,
    LABEL_KEYWORDS,
    LOCKED_FIELD,
    SYSTEM_FIELD,
    SYSTEM_MARKER,
)
from flowq.flows.models import FlowNode, NodeType
from flowq.observability.logging import get_logger

logger = get_logger(__name__)


class ConsentGuardPolicy(Protocol):
    """Protocol for deciding whether a node is a marketing-consent gate."""

    def is_consent_guard(self, node: FlowNode | None) -> bool:
        """Return True if node gates on marketing consent.

        Side Effects:
            None - pure function
        """
        ...


def _is_locked(data: dict[str, Any]) -> bool:
    return data.get(LOCKED_FIELD) is True


def _serialize_data(data: dict[str, Any] | None) -> str:
    return json.dumps(data or {}, separators=(",", ":"), default=str).lower()


class HeuristicConsentPolicy:
    """
    Pattern-matching consent detection.

    A condition node is a guard if any of:
    1. its label contains a label keyword
    2. its serialized data contains a data keyword
    3. data.locked is True (guards synthesized by the injector)
    4. data.system == "marketing_consent"
    """

    def __init__(
        self,
        rules_path: Path | None = None,
        label_keywords: tuple[str, ...] | None = None,
        data_keywords: tuple[str, ...] | None = None,
    ):
        """
        Args:
            rules_path: YAML rules file. If None, uses CONSENT_RULES_PATH.
                        Explicit keyword arguments win over the file.
            label_keywords: Override label keywords
            data_keywords: Override data keywords
        """
        rules = self._load_rules(rules_path or CONSENT_RULES_PATH)

        if label_keywords is None:
            label_keywords = rules.get("label_keywords") or LABEL_KEYWORDS
        if data_keywords is None:
            data_keywords = rules.get("data_keywords") or DATA_KEYWORDS

        self.label_keywords: tuple[str, ...] = tuple(kw.lower() for kw in label_keywords)
        self.data_keywords: tuple[str, ...] = tuple(kw.lower() for kw in data_keywords)

        logger.debug(
            "HeuristicConsentPolicy initialized: %d label keywords, %d data keywords",
            len(self.label_keywords),
            len(self.data_keywords),
        )

    def _load_rules(self, path: Path) -> dict[str, Any]:
        """Load keyword overrides from YAML config."""
        if not path.exists():
            logger.warning("Consent rules not found at %s, using built-in keywords", path)
            return {}

        with open(path) as f:
            rules = yaml.safe_load(f) or {}

        if not isinstance(rules, dict):
            logger.warning("Consent rules at %s are not a mapping, using built-in keywords", path)
            return {}
        return rules

    def is_consent_guard(self, node: FlowNode | None) -> bool:
        if node is None or node.type != NodeType.CONDITION:
            return False

        label = node.label.lower()
        if any(kw in label for kw in self.label_keywords):
            return True

        data = node.data or {}
        if _is_locked(data) or data.get(SYSTEM_FIELD) == SYSTEM_MARKER:
            return True

        serialized = _serialize_data(node.data)
        return any(kw in serialized for kw in self.data_keywords)


class MarkerConsentPolicy:
    """Typed consent detection: data.kind == "consent_guard" or a locked guard."""

    def is_consent_guard(self, node: FlowNode | None) -> bool:
        if node is None or node.type != NodeType.CONDITION:
            return False
        data = node.data or {}
        return data.get(KIND_FIELD) == KIND_CONSENT_GUARD or _is_locked(data)


_default_policy: ConsentGuardPolicy | None = None


def get_default_policy() -> ConsentGuardPolicy:
    """
    Get or create the process-wide default policy (heuristic).

    Side Effects:
        - Reads the YAML rules file on first call
    """
    global _default_policy
    if _default_policy is None:
        _default_policy = HeuristicConsentPolicy()
    return _default_policy


def set_default_policy(policy: ConsentGuardPolicy | None) -> None:
    """Replace the default policy. None resets to the heuristic on next use."""
    global _default_policy
    _default_policy = policy
