"""Filesystem locations used by the service and the API client."""

import os
from pathlib import Path

# otakutrack/paths.py -> repository root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Local OTAKU_ overrides for the service
ENV_FILE = PROJECT_ROOT / ".env"

# Signed-in client state lives per user, not per checkout
DEFAULT_TOKEN_FILE = Path.home() / ".otakutrack" / "auth.json"


def token_file_path(path: Path | str | None = None) -> Path:
    """Resolve where the client keeps its access token.

    :param path: Explicit location, used as given when set.
    :returns: The explicit path, else OTAKU_TOKEN_FILE, else ~/.otakutrack/auth.json.
    """
    if path:
        return Path(path)
    return Path(os.environ.get("OTAKU_TOKEN_FILE") or DEFAULT_TOKEN_FILE)
