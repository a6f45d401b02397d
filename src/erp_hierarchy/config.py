"""Configuration constants for the ERP hierarchy tools."""

import os
from pathlib import Path

# Backend base URL. All endpoint paths are relative to it.
API_BASE_URL: str = os.environ.get("ERP_API_URL", "http://localhost:8080").rstrip("/")

# API token. The environment wins; otherwise the first file found is used.
API_TOKEN_ENV: str = "ERP_API_TOKEN"
API_TOKEN_FILES: list[Path] = [
    Path("~/.config/erp-hierarchy-token.txt").expanduser(),
    Path("~/.config/secret/erp-hierarchy-token.txt").expanduser(),
]

# Sent as the "affiliation" header when set.
AFFILIATION_ID: str | None = os.environ.get("ERP_AFFILIATION_ID") or None

# Seconds before a request gives up.
REQUEST_TIMEOUT: float = 10.0

# Seconds a fetched tree list stays fresh in the list cache.
LIST_STALE_SECONDS: float = 60.0

# Deepest level that may still receive children is MAX_DEPTH - 1.
CATEGORY_MAX_DEPTH: int = 2
PROGRAM_MAX_DEPTH: int = 3

# Worker threads used for fire-and-forget mutations.
MUTATION_WORKERS: int = 4


def resolve_api_token() -> str | None:
    """Return the API token from the environment or the first readable token file."""
    token = os.environ.get(API_TOKEN_ENV, "").strip()
    if token:
        return token
    for token_path in API_TOKEN_FILES:
        try:
            return token_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            pass
    return None
