"""Classification of decoded stream records.

Each record is a JSON object, either flat or with its fields nested under
``data``. Records that cannot be parsed are skipped, never raised.
"""

import json
import logging
from typing import Any

from src.models.schemas import ClassifiedEvent, EventKind, ProgressEvent

logger = logging.getLogger(__name__)

END_OF_STREAM = "[DONE]"
RESULT_TYPE = "result"
PROGRESS_TYPE = "thinking"

IGNORED = ClassifiedEvent(kind=EventKind.IGNORE)
END_OF_STREAM_EVENT = ClassifiedEvent(kind=EventKind.END_OF_STREAM)

# Missing, null and empty values all fall through to the next source
_DEFAULTS = {"stage": "thinking", "message": "", "status": "info"}


def _lookup(payload: dict[str, Any], nested: dict[str, Any], field: str) -> Any:
    """Read a field from the top level first, then from ``data``."""
    return payload.get(field) or nested.get(field) or None


def _progress(payload: dict[str, Any], nested: dict[str, Any]) -> ProgressEvent:
    fields = {}
    for field, default in _DEFAULTS.items():
        value = _lookup(payload, nested, field)
        fields[field] = default if value is None else str(value)
    return ProgressEvent(**fields)


def classify(record: str) -> ClassifiedEvent:
    """Tag a record as progress, result, end-of-stream or ignorable.

    Args:
        record: Payload text of one data line.

    Returns:
        The classified event. Empty, malformed and unrecognised records
        return IGNORED.
    """
    text = record.strip()
    if not text:
        return IGNORED
    if text == END_OF_STREAM:
        return END_OF_STREAM_EVENT

    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        logger.debug(f"Skipping malformed record: {text[:200]}")
        return IGNORED
    if not isinstance(payload, dict):
        logger.debug(f"Skipping non-object record: {text[:200]}")
        return IGNORED

    nested = payload.get("data")
    if not isinstance(nested, dict):
        nested = {}

    if payload.get("type") == RESULT_TYPE:
        if not nested:
            nested = {k: v for k, v in payload.items() if k not in ("type", "data")}
        return ClassifiedEvent(kind=EventKind.RESULT, payload=nested)

    if payload.get("type") == PROGRESS_TYPE or _lookup(payload, nested, "stage"):
        return ClassifiedEvent(kind=EventKind.PROGRESS, progress=_progress(payload, nested))

    return IGNORED
