"""
Module: consent_data
Purpose: Keyword constants for the heuristic consent-guard policy.
Dependencies: None (pure data, no imports)

Separates detection data from detection logic. Edit this file (or override
it with flowq/data/consent_rules.yaml) to change what counts as a consent guard
without touching consent.py.
"""

# ---------------------------------------------------------------------------
# Label keywords (matched against the lowercased node label)
# "marketing" and "consent" already cover the longer phrases; the phrases are
# kept so a narrowed override file still recognizes synthesized guards.
# ---------------------------------------------------------------------------

LABEL_KEYWORDS: tuple[str, ...] = (
    "marketing",
    "consent",
    "requires consent",
    "marketing consent",
)

# ---------------------------------------------------------------------------
# Data keywords (matched against the lowercased compact JSON of node.data)
# ---------------------------------------------------------------------------

DATA_KEYWORDS: tuple[str, ...] = (
    "marketing_subscribed",
    "marketingsubscribed",
    "email subscribers",
)

# ---------------------------------------------------------------------------
# System markers
# ---------------------------------------------------------------------------

# data.locked === true marks guards synthesized by the consent injector
LOCKED_FIELD = "locked"

# data.system value some generator versions emit on their own guards
SYSTEM_FIELD = "system"
SYSTEM_MARKER = "marketing_consent"

# data.kind value for the typed (non-heuristic) policy
KIND_FIELD = "kind"
KIND_CONSENT_GUARD = "consent_guard"
