"""
Centralized environment variable loader for FlowQ.

Settings and the CLI call ensure_env_loaded() before reading env vars.

Side Effects:
    - Loads .env file from project root (first one found walking upward)

Usage:
    from flowq.infrastructure.env import ensure_env_loaded, get_optional_env

    ensure_env_loaded()
    rules_path = get_optional_env("FLOWQ_CONSENT_RULES")
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

_ENV_LOADED = False


def ensure_env_loaded(env_path: Path | None = None) -> None:
    """
    Ensure .env file is loaded exactly once.

    Args:
        env_path: Optional path to .env file. If None, searches for project root.

    Side Effects:
        - Loads environment variables from .env file (never overrides existing ones)
        - Sets module-level flag to prevent double-loading
    """
    global _ENV_LOADED
    if _ENV_LOADED:
        return

    if env_path is None:
        current = Path(__file__).parent
        while current != current.parent:
            env_candidate = current / ".env"
            if env_candidate.exists():
                env_path = env_candidate
                break
            current = current.parent

    if env_path and env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()
    _ENV_LOADED = True


def get_optional_env(key: str, default: str = "") -> str:
    """
    Get optional environment variable with default value.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    ensure_env_loaded()
    return os.getenv(key, default)
