"""Centralized credential configuration.

TickTick client credentials are read from the environment. A .env file
at the repo root is auto-loaded on import:
    TICKTICK_CLIENT_ID      - OAuth client ID from the TickTick developer center
    TICKTICK_CLIENT_SECRET  - OAuth client secret
    TICKTICK_REDIRECT_URI   - Redirect URI registered for the app

Variables already present in the process environment take precedence
over values from .env. Tokens are never written to disk.
"""

import os
from pathlib import Path

# __file__ is src/ticktick_auth/config.py, so 3 levels up
REPO_ROOT = Path(__file__).parent.parent.parent
ENV_FILE = REPO_ROOT / ".env"

CLIENT_ID_ENV = "TICKTICK_CLIENT_ID"
CLIENT_SECRET_ENV = "TICKTICK_CLIENT_SECRET"
REDIRECT_URI_ENV = "TICKTICK_REDIRECT_URI"

DEFAULT_REDIRECT_URI = "http://localhost:8080"


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
                value = value[1:-1]

            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


def get_redirect_uri() -> str:
    """Get the configured redirect URI, falling back to the local default."""
    return os.environ.get(REDIRECT_URI_ENV) or DEFAULT_REDIRECT_URI


def get_credential_status() -> dict:
    """Report which TickTick settings are configured, without their values.

    Returns:
        Dictionary with credential status.
    """
    return {
        "repo_root": str(REPO_ROOT),
        "env_file": ENV_FILE.exists(),
        "ticktick": {
            "client_id": bool(os.environ.get(CLIENT_ID_ENV)),
            "client_secret": bool(os.environ.get(CLIENT_SECRET_ENV)),
            "redirect_uri": bool(os.environ.get(REDIRECT_URI_ENV)),
        },
    }


# Auto-load .env from repo root on import
_loaded = _load_env_file(ENV_FILE)
