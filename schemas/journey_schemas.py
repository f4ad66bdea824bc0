from pydantic import BaseModel, ConfigDict, Field, AfterValidator, field_validator
from typing import Annotated, List, Optional
from datetime import datetime, timezone
from enum import Enum
import uuid

from models import RecordType, MessageRole, SessionScope


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are read as UTC so every comparison is between aware datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class ItemKind(str, Enum):
    HIGHLIGHT = "highlight"
    NOTE = "note"
    GUIDED_SESSION = "guided_session"
    GUIDED_INSIGHT = "guided_insight"
    BOOKMARK = "bookmark"

    @property
    def display_name(self) -> str:
        return _KIND_DISPLAY_NAMES[self]


_KIND_DISPLAY_NAMES = {
    ItemKind.HIGHLIGHT: "Highlights",
    ItemKind.NOTE: "Notes",
    ItemKind.GUIDED_SESSION: "Sessions",
    ItemKind.GUIDED_INSIGHT: "Insights",
    ItemKind.BOOKMARK: "Bookmarks",
}


class SortOption(str, Enum):
    RECENT = "recent"
    OLDEST = "oldest"
    PINNED = "pinned"

    @property
    def label(self) -> str:
        return {"recent": "Recent", "oldest": "Oldest", "pinned": "Pinned First"}[self.value]


class ScriptureRef(BaseModel):
    """A passage of text, e.g. ``Genesis 4:1-3``."""
    model_config = ConfigDict(frozen=True)

    scripture_id: str
    book_id: str
    chapter: int
    verse_start: Optional[int] = None
    verse_end: Optional[int] = None
    display: str


class UnifiedItem(BaseModel):
    """One row of the Journey feed, whatever record it was built from."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    kind: ItemKind
    ref: ScriptureRef
    title: Optional[str] = None
    body: Optional[str] = None
    quote: Optional[str] = None  # verse text for highlights/notes
    tags: Optional[List[str]] = None
    created_at: UtcDatetime = Field(default_factory=_utcnow)
    updated_at: UtcDatetime = Field(default_factory=_utcnow)
    is_pinned: bool = False
    source_session_id: Optional[str] = None
    text_name: Optional[str] = None  # e.g. "King James Bible"


class InsightBlob(BaseModel):
    """Persisted form of the insight collection."""
    version: int = 1
    insights: List[UnifiedItem] = Field(default_factory=list)


# --- Request payloads ---

class InsightCreate(BaseModel):
    body: str
    session_id: str
    ref: ScriptureRef
    title: Optional[str] = None
    quote: Optional[str] = None


class InsightBodyUpdate(BaseModel):
    body: str


class FilterUpdate(BaseModel):
    search_text: Optional[str] = None
    kinds: Optional[List[ItemKind]] = None
    scripture_ids: Optional[List[str]] = None
    book_ids: Optional[List[str]] = None
    sort: Optional[SortOption] = None
    pinned_only: Optional[bool] = None


class JourneyRecordCreate(BaseModel):
    id: Optional[str] = None
    verse_id: str
    reference: str
    verse_text: str
    type: RecordType
    religion: str = ""
    text_name: str = ""
    note_text: Optional[str] = None
    created_at: Optional[UtcDatetime] = None


class GuidedSessionMessageCreate(BaseModel):
    id: Optional[str] = None
    role: MessageRole
    text: str
    timestamp: Optional[UtcDatetime] = None


class GuidedSessionCreate(BaseModel):
    id: Optional[str] = None
    reference: str
    scope: SessionScope = SessionScope.CHAPTER
    scripture_id: str
    book: str
    chapter: int
    verse_range: Optional[List[int]] = None
    title: Optional[str] = None
    messages: List[GuidedSessionMessageCreate] = Field(default_factory=list)
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None

    @field_validator('verse_range')
    @classmethod
    def check_verse_range(cls, value):
        if value is None:
            return value
        if len(value) != 2 or value[0] > value[1]:
            raise ValueError("verse_range must be [start, end] with start <= end")
        return value
