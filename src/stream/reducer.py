"""Pure state transitions for a streaming session.

The reducer knows nothing about transport, cancellation or session
identity; it only folds classified events into a progress log and a result.
"""

import logging

from pydantic import BaseModel, ConfigDict, ValidationError

from src.models.schemas import ClassifiedEvent, EventKind, NormalizedResult, ProgressEvent
from src.stream.normalizer import normalize

logger = logging.getLogger(__name__)

PROGRESS_LOG_LIMIT = 12


class StreamState(BaseModel):
    """Progress log and latest result of one session.

    Attributes:
        progress: The most recent progress events, oldest first.
        result: The last result received, if any.
    """

    model_config = ConfigDict(frozen=True)

    progress: tuple[ProgressEvent, ...] = ()
    result: NormalizedResult | None = None


def apply(state: StreamState, event: ClassifiedEvent) -> StreamState:
    """Return the state after applying one event.

    Progress events are appended and the log trimmed to the most recent
    PROGRESS_LOG_LIMIT entries. A result replaces any earlier result.
    Everything else leaves the state unchanged.
    """
    if event.kind is EventKind.PROGRESS and event.progress is not None:
        progress = (*state.progress, event.progress)[-PROGRESS_LOG_LIMIT:]
        return state.model_copy(update={"progress": progress})

    if event.kind is EventKind.RESULT:
        try:
            result = normalize(event.payload)
        except ValidationError as e:
            logger.warning(f"Ignoring result with invalid shape: {e.error_count()} error(s)")
            return state
        return state.model_copy(update={"result": result})

    return state
