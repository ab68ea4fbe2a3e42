"""Streaming ingestion pipeline for match analysis queries.

Turns the chunked ``/query/stream`` response into bounded, consistent state.

Responsibilities:
    - Frame decoding with carry-over of partial lines and characters
    - Record classification into progress, result and end-of-stream
    - Result normalization across backend versions
    - Pure state transitions with a capped progress log
    - Session lifecycle with generation-guarded updates

The session controller lives in ``src.stream.session`` and is imported from
there directly.
"""

from src.stream.classifier import classify
from src.stream.decoder import FrameDecoder
from src.stream.errors import StreamCancelled, TransportError
from src.stream.normalizer import normalize
from src.stream.reducer import PROGRESS_LOG_LIMIT, StreamState, apply

__all__ = [
    "PROGRESS_LOG_LIMIT",
    "FrameDecoder",
    "StreamCancelled",
    "StreamState",
    "TransportError",
    "apply",
    "classify",
    "normalize",
]
