from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator


class SessionState(str, Enum):
    """Lifecycle states of a query session."""

    IDLE = "idle"
    STREAMING = "streaming"
    COMPLETED = "completed"
    ERRORED = "errored"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.ERRORED, SessionState.CANCELLED)


class EventKind(str, Enum):
    """Classification of a decoded stream record."""

    PROGRESS = "progress"
    RESULT = "result"
    END_OF_STREAM = "end_of_stream"
    IGNORE = "ignore"


class ErrorSource(str, Enum):
    """Where a session failure originated."""

    TRANSPORT = "transport"
    APPLICATION = "application"
    NO_LIVE_UPDATES = "no_live_updates"


class ErrorCategory(str, Enum):
    """Presentation category of a session failure."""

    GENERAL = "general"
    MEMORY_LIMIT = "memory_limit"


class QueryRequest(BaseModel):
    """Request payload for the streaming query endpoint.

    Attributes:
        query: The user's question about a match.
        include_highlights: Ask the backend to search for highlight videos.
        emphasize_order: Ask the backend to keep key moments in match order.
        audience: Audience segment, sent on the wire as ``gender``.
    """

    query: str = Field(..., min_length=1)
    include_highlights: bool = True
    emphasize_order: bool = True
    audience: str = Field("men", serialization_alias="gender")

    @field_validator("query", mode="before")
    @classmethod
    def strip_query(cls, v: str) -> str:
        """Strip whitespace from query before validation."""
        if isinstance(v, str):
            return v.strip()
        return v

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ProgressEvent(BaseModel):
    """One step of backend reasoning reported while a query runs."""

    model_config = ConfigDict(frozen=True)

    stage: str = "thinking"
    message: str = ""
    status: str = "info"


class ClassifiedEvent(BaseModel):
    """A stream record tagged with its kind.

    Attributes:
        kind: What the record represents.
        progress: The progress step, for PROGRESS events.
        payload: The raw result object, for RESULT events.
    """

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    progress: ProgressEvent | None = None
    payload: dict[str, Any] | None = None


def _as_text(v: Any) -> Any:
    if v is None or isinstance(v, str):
        return v
    return str(v)


# Backend-owned display text; numbers and other scalars are rendered as sent
Text = Annotated[str | None, BeforeValidator(_as_text)]


class HighlightItem(BaseModel):
    """A highlight video or link attached to a result.

    Only ``title`` and ``url`` are read by the client; the other fields are
    kept exactly as the backend sent them.
    """

    model_config = ConfigDict(extra="allow")

    title: Text = None
    url: Text = None
    duration: Any = None
    source_type: Any = None
    is_nbc_sports: Any = None
    is_official_club: Any = None
    confidence: Any = None


class KeyMoment(BaseModel):
    """A notable moment of a match (goal, card, substitution...)."""

    model_config = ConfigDict(extra="allow")

    minute: Any = None
    event: Text = None
    description: Text = None
    team: Text = None
    momentum_impact: Text = None
    reasoning: Text = None

    def label(self) -> str:
        minute = f"{self.minute}'" if self.minute is not None else None
        return " ".join(p for p in (minute, self.event, self.description) if p)


class MatchMetadata(BaseModel):
    """Typed view over the ``match_metadata`` object of a result."""

    model_config = ConfigDict(extra="allow")

    home_team: Text = None
    away_team: Text = None
    match_date: Text = None
    score: Text = None
    competition: Text = None
    key_moments: list[KeyMoment] = Field(default_factory=list)
    man_of_the_match: Text = None
    match_summary: Text = None

    @field_validator("key_moments", mode="before")
    @classmethod
    def keep_moment_objects(cls, v: Any) -> list[Any]:
        if not isinstance(v, list):
            return []
        return [m for m in v if isinstance(m, dict)]

    def scoreline(self) -> str | None:
        """Return "Home score Away", or None without teams."""
        if not (self.home_team and self.away_team):
            return None
        return f"{self.home_team} {self.score or 'vs'} {self.away_team}"


class NormalizedResult(BaseModel):
    """Canonical result shape observed by the rest of the application.

    Fields the backend sends beyond the declared ones are kept as extras.

    Attributes:
        success: Backend-reported success flag.
        intent: Detected query intent.
        summary: Answer text.
        match_metadata: Teams, score and key moments, passed through as sent.
        highlights: Highlight items, never absent.
        sources: Source URLs, never absent.
        game_analysis: Deep, momentum and tactical analysis, passed through.
        error: Failure message.
    """

    model_config = ConfigDict(extra="allow")

    success: bool | None = None
    intent: Text = None
    summary: Text = None
    match_metadata: dict[str, Any] | None = None
    highlights: list[HighlightItem] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    game_analysis: dict[str, Any] | None = None
    error: Text = None

    def primary_highlight(self) -> HighlightItem | None:
        """Return the first highlight that links somewhere."""
        return next((h for h in self.highlights if h.url), None)

    def metadata(self) -> MatchMetadata | None:
        if self.match_metadata is None:
            return None
        return MatchMetadata.model_validate(self.match_metadata)

    def key_moments(self) -> list[KeyMoment]:
        meta = self.metadata()
        return meta.key_moments if meta else []


class SessionError(BaseModel):
    """Terminal failure of a session.

    Attributes:
        message: User-facing message.
        source: Transport, application or missing-result failure.
        category: Memory exhaustion is presented separately.
        status_code: HTTP status for transport failures with a response.
        detail: Underlying error text.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    source: ErrorSource
    category: ErrorCategory = ErrorCategory.GENERAL
    status_code: int | None = None
    detail: str | None = None

    @property
    def display_text(self) -> str:
        if self.category is ErrorCategory.MEMORY_LIMIT:
            return "Memory usage exceeded. Try a simpler query."
        return self.message


class SessionSnapshot(BaseModel):
    """Observable state of the current session."""

    model_config = ConfigDict(frozen=True)

    generation: int = 0
    status: SessionState = SessionState.IDLE
    query: str | None = None
    progress: tuple[ProgressEvent, ...] = ()
    result: NormalizedResult | None = None
    error: SessionError | None = None
