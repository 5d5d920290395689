"""
API key resolution and auth header construction.

Resolves API keys from multiple sources:
1. Explicit value
2. Environment variables
3. System keyring (optional)
"""

from __future__ import annotations

import os

API_KEY_HEADER = "x-goog-api-key"
_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")
_KEYRING_SERVICES = ("gemini-kit", "google-genai")


def resolve_api_key(explicit_key: str | None = None) -> str | None:
    """Resolve the API key.

    Resolution order:
    1. Explicit key if provided
    2. GEMINI_API_KEY, then GOOGLE_API_KEY
    3. System keyring (if available)

    Args:
        explicit_key: Explicitly provided API key

    Returns:
        Resolved API key or None if not found
    """
    if explicit_key:
        return explicit_key

    for env_var in _ENV_VARS:
        key = os.getenv(env_var)
        if key:
            return key

    return _try_keyring()


def _try_keyring() -> str | None:
    """Try to get the API key from the system keyring.

    Returns:
        API key from keyring or None
    """
    try:
        import keyring
        from keyring.errors import KeyringError
    except ImportError:
        # keyring not installed
        return None

    for service in _KEYRING_SERVICES:
        try:
            key = keyring.get_password(service, "api_key")
        except KeyringError:
            # No usable backend (common in containers, WSL, etc.)
            return None
        if key:
            return key

    return None


def get_auth_header(api_key: str, *, bearer: bool = False) -> dict[str, str]:
    """Build the authentication header.

    Args:
        api_key: API key
        bearer: Use ``Authorization: Bearer`` (OpenAI compatibility mode)
            instead of the dedicated API key header

    Returns:
        Dictionary with the authentication header
    """
    if bearer:
        return {"Authorization": f"Bearer {api_key}"}
    return {API_KEY_HEADER: api_key}
