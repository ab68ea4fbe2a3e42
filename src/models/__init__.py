"""Pydantic models for query requests, stream events and results.

Provides type safety and validation for everything flowing through the
streaming pipeline.

Models:
    - QueryRequest: Outgoing query payload
    - ProgressEvent: One backend reasoning step
    - ClassifiedEvent: A decoded record tagged with its kind
    - NormalizedResult: Canonical final result with highlights and sources
    - SessionSnapshot: Observable state of the current session
"""

from src.models.schemas import (
    ClassifiedEvent,
    ErrorCategory,
    ErrorSource,
    EventKind,
    HighlightItem,
    KeyMoment,
    MatchMetadata,
    NormalizedResult,
    ProgressEvent,
    QueryRequest,
    SessionError,
    SessionSnapshot,
    SessionState,
)

__all__ = [
    "ClassifiedEvent",
    "ErrorCategory",
    "ErrorSource",
    "EventKind",
    "HighlightItem",
    "KeyMoment",
    "MatchMetadata",
    "NormalizedResult",
    "ProgressEvent",
    "QueryRequest",
    "SessionError",
    "SessionSnapshot",
    "SessionState",
]
