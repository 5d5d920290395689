"""
Resilience - retrying request execution.
"""

from gemini_kit.resilience.executor import RequestExecutor, decode_body
from gemini_kit.resilience.retry import RetryPolicy, backoff_delay

__all__ = [
    "RequestExecutor",
    "RetryPolicy",
    "backoff_delay",
    "decode_body",
]
