"""Session controller for streaming match queries.

Owns the lifecycle of one query at a time:

1. **Supersede** - A new submission cancels the previous run and bumps the
   generation counter. Events are applied only while their
   generation is still current, so a stale stream that keeps delivering
   cannot touch the new session's state.

2. **Route** - Bytes go through the FrameDecoder, records through the
   classifier, events through the reducer. Malformed records are skipped.

3. **Finish** - The end of the stream (sentinel or close) decides the
   terminal state: cancelled, errored (transport, application or no result)
   or completed.

4. **Teardown** - Each run reads in its own task. ``cancel()``, ``close()``
   and a newer submission cancel that task, which interrupts a pending read
   and releases the response even when the server has gone quiet.
"""

import asyncio
import logging
from collections.abc import Callable

from src.client.config import ClientConfig, get_client_config
from src.client.transport import CancelToken, QueryTransport, StreamHandle
from src.models.schemas import (
    ErrorSource,
    EventKind,
    QueryRequest,
    SessionError,
    SessionSnapshot,
    SessionState,
)
from src.stream.classifier import classify
from src.stream.decoder import FrameDecoder
from src.stream.errors import (
    APPLICATION_FALLBACK_MESSAGE,
    NO_LIVE_UPDATES_MESSAGE,
    StreamCancelled,
    TransportError,
    describe_error,
    transport_failure,
)
from src.stream.reducer import StreamState, apply

logger = logging.getLogger(__name__)

Listener = Callable[[SessionSnapshot], None]


class SessionController:
    """Runs streaming queries and publishes their observable state."""

    def __init__(
        self,
        transport: QueryTransport | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        self._config = config or get_client_config()
        self._transport = transport or QueryTransport(self._config)
        self._generation = 0
        self._token: CancelToken | None = None
        self._run_task: asyncio.Task[SessionState] | None = None
        self._state = StreamState()
        self._snapshot = SessionSnapshot()
        self._listeners: list[Listener] = []

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for snapshot changes.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def build_request(self, query: str, **overrides: object) -> QueryRequest:
        """Build a request with flags defaulted from configuration."""
        fields: dict[str, object] = {
            "query": query,
            "include_highlights": self._config.include_highlights,
            "emphasize_order": self._config.emphasize_order,
            "audience": self._config.audience,
        }
        fields.update(overrides)
        return QueryRequest.model_validate(fields)

    async def submit(self, request: QueryRequest) -> SessionState:
        """Run a query until its stream reaches a terminal state.

        Any session still streaming is cancelled first. The stream is read
        in a separate task so cancellation never waits for the next chunk.

        Args:
            request: The query to send.

        Returns:
            The terminal state of this run. A run superseded by a later
            submission returns CANCELLED without touching current state.
        """
        self._cancel_current()
        self._generation += 1
        generation = self._generation
        token = CancelToken()
        self._token = token
        self._state = StreamState()
        self._publish(
            SessionSnapshot(generation=generation, status=SessionState.STREAMING, query=request.query)
        )
        logger.info(f"Session {generation} started: {request.query[:80]!r}")

        run = asyncio.create_task(self._run(generation, token, request))
        self._run_task = run
        try:
            return await run
        except asyncio.CancelledError:
            # Interrupted by cancel(), close() or a newer submission
            if run.cancelled() and not asyncio.current_task().cancelling():
                return self._finish(generation, SessionState.CANCELLED)
            raise
        finally:
            if self._run_task is run:
                self._run_task = None

    async def _run(self, generation: int, token: CancelToken, request: QueryRequest) -> SessionState:
        handle: StreamHandle | None = None
        try:
            handle = await self._transport.start(request, token)
            await self._consume(generation, token, handle)
        except StreamCancelled:
            return self._finish(generation, SessionState.CANCELLED)
        except TransportError as e:
            if token.cancelled:
                return self._finish(generation, SessionState.CANCELLED)
            logger.warning(f"Session {generation} transport failure: {e}")
            return self._finish(generation, SessionState.ERRORED, transport_failure(e))
        except asyncio.CancelledError:
            token.cancel()
            self._finish(generation, SessionState.CANCELLED)
            raise
        finally:
            if handle is not None:
                await handle.aclose()

        return self._conclude(generation, token)

    def cancel(self) -> None:
        """Cancel the current session on behalf of the caller."""
        if self._snapshot.status is SessionState.STREAMING:
            self._cancel_current()
            self._finish(self._generation, SessionState.CANCELLED)

    def close(self) -> None:
        """Tear down when the owning context goes away."""
        if self._snapshot.status is SessionState.STREAMING:
            logger.info(f"Session {self._generation} torn down while streaming")
        self.cancel()
        self._listeners.clear()

    async def aclose(self) -> None:
        self.close()
        await self._transport.aclose()

    async def _consume(self, generation: int, token: CancelToken, handle: StreamHandle) -> None:
        decoder = FrameDecoder()
        async for chunk in handle.chunks():
            for record in decoder.feed(chunk):
                if token.cancelled:
                    raise StreamCancelled()
                if self._route(generation, record) is EventKind.END_OF_STREAM:
                    return
        tail = decoder.flush()
        if tail is not None and not token.cancelled:
            self._route(generation, tail)

    def _route(self, generation: int, record: str) -> EventKind:
        event = classify(record)
        if not self._is_current(generation):
            logger.debug(f"Discarding {event.kind.value} event from stale session {generation}")
            return event.kind
        if event.kind in (EventKind.IGNORE, EventKind.END_OF_STREAM):
            return event.kind

        state = apply(self._state, event)
        result = state.result
        if result is not None and result.success is False and not result.error:
            state = state.model_copy(
                update={"result": result.model_copy(update={"error": APPLICATION_FALLBACK_MESSAGE})}
            )
        if state is not self._state:
            self._state = state
            self._publish(
                self._snapshot.model_copy(
                    update={"progress": state.progress, "result": state.result}
                )
            )
        return event.kind

    def _conclude(self, generation: int, token: CancelToken) -> SessionState:
        if token.cancelled:
            return self._finish(generation, SessionState.CANCELLED)

        result = self._state.result if self._is_current(generation) else None
        if result is None:
            error = describe_error(NO_LIVE_UPDATES_MESSAGE, ErrorSource.NO_LIVE_UPDATES)
            return self._finish(generation, SessionState.ERRORED, error)
        if result.success is False:
            error = describe_error(
                result.error or APPLICATION_FALLBACK_MESSAGE, ErrorSource.APPLICATION
            )
            return self._finish(generation, SessionState.ERRORED, error)
        return self._finish(generation, SessionState.COMPLETED)

    def _finish(
        self,
        generation: int,
        status: SessionState,
        error: SessionError | None = None,
    ) -> SessionState:
        if generation != self._generation:
            logger.debug(f"Stale session {generation} finished as {status.value}")
            return status
        if self._snapshot.status.is_terminal:
            return self._snapshot.status

        self._token = None
        self._publish(self._snapshot.model_copy(update={"status": status, "error": error}))
        logger.info(f"Session {generation} finished: {status.value}")
        return status

    def _is_current(self, generation: int) -> bool:
        return (
            generation == self._generation
            and self._snapshot.status is SessionState.STREAMING
        )

    def _cancel_current(self) -> None:
        if self._token is not None:
            self._token.cancel()
            self._token = None
        run, self._run_task = self._run_task, None
        # A listener running inside the read loop only needs the token
        if run is not None and not run.done() and run is not asyncio.current_task():
            run.cancel()

    def _publish(self, snapshot: SessionSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)
