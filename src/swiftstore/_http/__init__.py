"""HTTP infrastructure shared by the sync and async connections."""

from .config import DEFAULT_RETRIES, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, ConnectionConfig
from .iter_coroutine import iter_coroutine
from .transport import AsyncTransport, BaseTransport, BlockingTransport

__all__ = [
    "DEFAULT_RETRIES",
    "DEFAULT_TIMEOUT",
    "DEFAULT_USER_AGENT",
    "ConnectionConfig",
    "iter_coroutine",
    "BaseTransport",
    "BlockingTransport",
    "AsyncTransport",
]
