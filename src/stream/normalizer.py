"""Normalization of backend result payloads.

Backend versions disagree on the result shape: the answer text may arrive
as ``summary`` or ``answer``, highlights as plain titles or as objects, and
list fields may be missing entirely. Everything downstream sees a single
NormalizedResult.
"""

import logging
from collections.abc import Mapping
from typing import Any

from src.models.schemas import NormalizedResult

logger = logging.getLogger(__name__)


def _highlights(value: Any) -> list[Any]:
    if not isinstance(value, list):
        return []
    items: list[Any] = []
    for item in value:
        if isinstance(item, str):
            items.append({"title": item})
        elif isinstance(item, Mapping):
            items.append(item)
        else:
            logger.debug(f"Dropping highlight of type {type(item).__name__}")
    return items


def normalize(raw: Mapping[str, Any] | None) -> NormalizedResult:
    """Map a raw result payload onto the canonical result shape.

    Args:
        raw: Result object as sent by the backend.

    Returns:
        NormalizedResult with highlights and sources always present.

    Raises:
        pydantic.ValidationError: If a declared field has an unusable type.
    """
    data = dict(raw or {})
    summary = data.get("summary")
    data["summary"] = summary if summary is not None else data.get("answer")
    data["highlights"] = _highlights(data.get("highlights"))
    sources = data.get("sources")
    data["sources"] = sources if isinstance(sources, list) else []
    return NormalizedResult.model_validate(data)
