"""
Per-call request descriptors.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel


class RequestTarget(str, Enum):
    """Which base URL and auth-header style a request uses."""

    STANDARD = "standard"
    OPENAI = "openai"
    UPLOAD = "upload"


@dataclass
class RequestDescriptor:
    """Description of one logical API call.

    Attributes:
        path: Endpoint path relative to the target's base URL
        method: HTTP method
        body: Request body (pydantic model or JSON-compatible mapping)
        headers: Extra headers; these win over the base headers
        target: Base URL / auth style selector
        params: Query parameters
    """

    path: str
    method: str = "POST"
    body: BaseModel | Mapping[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)
    target: RequestTarget = RequestTarget.STANDARD
    params: dict[str, str] = field(default_factory=dict)

    @classmethod
    def get(cls, path: str, **kwargs: Any) -> RequestDescriptor:
        """Create a GET descriptor."""
        return cls(path=path, method="GET", **kwargs)

    @classmethod
    def delete(cls, path: str, **kwargs: Any) -> RequestDescriptor:
        """Create a DELETE descriptor."""
        return cls(path=path, method="DELETE", **kwargs)

    def serialize_body(self) -> bytes | None:
        """Encode the body as JSON bytes, or None when there is no body."""
        if self.body is None:
            return None
        if isinstance(self.body, BaseModel):
            return self.body.model_dump_json(by_alias=True, exclude_none=True).encode()
        return json.dumps(dict(self.body), separators=(",", ":")).encode()
