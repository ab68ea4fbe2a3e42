"""HTTP transport for the streaming query endpoint.

Opens a cancellable POST to ``/query/stream`` and exposes the response body
as an async iterator of raw byte chunks in arrival order.
"""

import logging
from collections.abc import AsyncIterator

import httpx

from src.client.config import ClientConfig, get_client_config
from src.models.schemas import QueryRequest
from src.stream.errors import StreamCancelled, TransportError

logger = logging.getLogger(__name__)

# Bodies of failed responses can be large HTML error pages
_MAX_DETAIL_CHARS = 500


class CancelToken:
    """Cooperative cancellation flag shared by a session and its stream."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class StreamHandle:
    """An open streaming response.

    Chunks must be read sequentially by a single consumer. Once the token is
    cancelled no further chunk is delivered and iteration raises
    StreamCancelled.
    """

    def __init__(
        self,
        response: httpx.Response,
        token: CancelToken,
        owned_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._response = response
        self.token = token
        self._owned_client = owned_client

    async def chunks(self) -> AsyncIterator[bytes]:
        """Yield response body chunks until the body ends or is cancelled.

        Raises:
            StreamCancelled: If the token was cancelled.
            TransportError: If the connection fails mid-body.
        """
        if self.token.cancelled:
            raise StreamCancelled()
        try:
            async for chunk in self._response.aiter_bytes():
                if self.token.cancelled:
                    raise StreamCancelled()
                if chunk:
                    yield chunk
        except (httpx.HTTPError, httpx.StreamError) as e:
            if self.token.cancelled:
                raise StreamCancelled() from e
            raise TransportError(f"Stream interrupted: {e}", detail=str(e)) from e
        if self.token.cancelled:
            raise StreamCancelled()

    async def aclose(self) -> None:
        """Release the response and any client opened for it."""
        await self._response.aclose()
        if self._owned_client is not None:
            await self._owned_client.aclose()
            self._owned_client = None


class QueryTransport:
    """Starts streaming query requests against the analysis backend."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Optional client configuration.
                    Loads from environment if not provided.
            client: Optional shared HTTP client. When omitted, each request
                    opens its own client and closes it with the stream.
        """
        self._config = config or get_client_config()
        self._client = client

    async def start(
        self,
        request: QueryRequest,
        token: CancelToken | None = None,
    ) -> StreamHandle:
        """Send the query and return its open response stream.

        Args:
            request: The query payload, passed through as-is.
            token: Cancellation token to attach. A new one is created if
                   not provided.

        Returns:
            StreamHandle carrying the token and the byte stream.

        Raises:
            TransportError: On network failure or a non-success status.
            StreamCancelled: If the token was cancelled while connecting.
        """
        token = token or CancelToken()
        client = self._client or httpx.AsyncClient(timeout=self._config.request_timeout)
        owned_client = client if self._client is None else None

        http_request = client.build_request(
            "POST",
            self._config.stream_url,
            json=request.to_wire(),
            headers={"Accept": "text/event-stream"},
        )
        try:
            response = await client.send(http_request, stream=True)
        except httpx.RequestError as e:
            if owned_client is not None:
                await owned_client.aclose()
            if token.cancelled:
                raise StreamCancelled() from e
            logger.warning(f"Connection to {self._config.stream_url} failed: {e}")
            raise TransportError(f"Connection failed: {e}", detail=str(e)) from e

        handle = StreamHandle(response, token, owned_client)

        if not response.is_success:
            body = await response.aread()
            await handle.aclose()
            detail = body.decode("utf-8", errors="replace")[:_MAX_DETAIL_CHARS]
            logger.warning(f"Query stream returned HTTP {response.status_code}")
            raise TransportError(
                f"HTTP {response.status_code}",
                status_code=response.status_code,
                detail=detail,
            )

        if token.cancelled:
            await handle.aclose()
            raise StreamCancelled()

        return handle

    async def aclose(self) -> None:
        """Close the shared HTTP client, if one was given."""
        if self._client is not None:
            await self._client.aclose()
