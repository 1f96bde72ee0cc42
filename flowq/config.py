"""Centralized configuration for the flow compiler.

Re-exports everything from flowq.infrastructure.settings, then adds typed
constants for layout, consent injection, and event logging. Environment
variable overrides use safe defaults so nothing needs configuring up front.
"""

from __future__ import annotations

from pathlib import Path

from flowq.infrastructure.env import get_optional_env
from flowq.infrastructure.settings import *  # noqa: F401, F403
from flowq.infrastructure.settings import DATA_DIR, is_production

# --- Consent injection ---
CONSENT_NODE_X_OFFSET: float = float(get_optional_env("FLOWQ_CONSENT_X_OFFSET", "200"))
CONSENT_NODE_LABEL: str = "Requires consent"
CONSENT_RULES_PATH: Path = Path(
    get_optional_env("FLOWQ_CONSENT_RULES", str(DATA_DIR / "consent_rules.yaml"))
)

# --- Fallback layout ---
LAYOUT_X_GAP: int = int(get_optional_env("FLOWQ_LAYOUT_X_GAP", "280"))
LAYOUT_Y_GAP: int = int(get_optional_env("FLOWQ_LAYOUT_Y_GAP", "180"))

# --- Structured events ---
# Production samples routine INFO events; WARNING and above are always emitted
EVENT_SAMPLE_RATE_INFO: float = float(
    get_optional_env("FLOWQ_EVENT_SAMPLE_RATE", "0.1" if is_production() else "1.0")
)
EVENT_MAX_FIELD_CHARS: int = 200
