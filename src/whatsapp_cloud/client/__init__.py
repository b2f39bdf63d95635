"""Outbound WhatsApp Cloud API client.

- Payload builders for every supported message type
- Timeout-bounded requests with conditional retry
"""

from .client import WhatsappClient
from .executor import execute, with_timeout
from .retry import RetryPolicy, RetryCondition, retry, timeout_retry_condition

__all__ = [
    "WhatsappClient",
    "execute",
    "with_timeout",
    "RetryPolicy",
    "RetryCondition",
    "retry",
    "timeout_retry_condition",
]
