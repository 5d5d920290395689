"""Transport strategy selection.

The strategy is chosen once, when a client is built; call sites only ever
see the Transport interface.
"""

from __future__ import annotations

from typing import Any

from gemini_kit.errors import UnsupportedPlatform
from gemini_kit.transport.base import Transport
from gemini_kit.transport.buffered import BufferedTransport
from gemini_kit.transport.http import StreamingTransport

TRANSPORTS = ("streaming", "buffered", "buffered-events")


def create_transport(name: str = "auto", **kwargs: Any) -> Transport:
    """Create a transport by strategy name.

    Args:
        name: "auto"/"streaming", "buffered" or "buffered-events"
        **kwargs: Passed to the transport constructor (timeout, proxy, client)

    Returns:
        Transport instance

    Raises:
        UnsupportedPlatform: If the strategy name is unknown
    """
    normalized = name.strip().lower().replace("_", "-")
    if normalized in ("auto", "streaming"):
        return StreamingTransport(**kwargs)
    if normalized == "buffered":
        return BufferedTransport(**kwargs)
    if normalized == "buffered-events":
        return BufferedTransport(split_events=True, **kwargs)
    raise UnsupportedPlatform(
        f"unknown transport '{name}' (expected one of: {', '.join(TRANSPORTS)})"
    )
