"""
Application-wide settings and environment configuration
"""

from __future__ import annotations

from pathlib import Path

from flowq.infrastructure.env import ensure_env_loaded, get_optional_env

ensure_env_loaded()

# Package paths (data files ship inside the package)
FLOWQ_ROOT = Path(__file__).parent.parent
DATA_DIR = FLOWQ_ROOT / "data"

# Environment
ENV = get_optional_env("FLOWQ_ENV", "development")


def is_production() -> bool:
    """Check if running in production"""
    return ENV == "production"
