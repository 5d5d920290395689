"""Runtime detection of optional extras.

- ``http2``: the ``h2`` package, enables HTTP/2 on the httpx client
- ``keyring``: OS keychain lookup of the API key
"""

from __future__ import annotations

import importlib.util


def _has_module(module_name: str) -> bool:
    return importlib.util.find_spec(module_name) is not None


HAS_HTTP2: bool = _has_module("h2")
HAS_KEYRING: bool = _has_module("keyring")
