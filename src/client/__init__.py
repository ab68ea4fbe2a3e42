"""HTTP client layer for the match analysis backend.

Responsibilities:
    - Environment-driven client configuration
    - Cancellable streaming requests to ``/query/stream``
    - Mapping HTTP and network failures onto TransportError
"""

from src.client.config import ClientConfig, get_client_config
from src.client.transport import CancelToken, QueryTransport, StreamHandle

__all__ = ["CancelToken", "ClientConfig", "QueryTransport", "StreamHandle", "get_client_config"]
