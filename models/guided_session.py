# models/guided_session.py
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple


def _utcnow():
    return datetime.now(timezone.utc)


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class SessionScope(str, Enum):
    CHAPTER = "chapter"
    RANGE = "range"
    SELECTED = "selected"


@dataclass
class GuidedSessionMessage:
    role: MessageRole
    text: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=_utcnow)

    def to_json(self):
        return {
            "id": self.id,
            "role": self.role.value,
            "text": self.text,
            "timestamp": self.timestamp.isoformat()
        }


@dataclass
class GuidedSession:
    reference: str
    scope: SessionScope
    scripture_id: str
    book: str
    chapter: int
    verse_range: Optional[Tuple[int, int]] = None
    messages: List[GuidedSessionMessage] = field(default_factory=list)
    title: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        if self.title is None:
            self.title = self.reference

    def first_user_message(self):
        return next((m for m in self.messages if m.role == MessageRole.USER), None)

    def update_title(self, first_user_message):
        """Title the session after its reference plus a preview of the opening question."""
        if first_user_message:
            preview = first_user_message[:30]
            suffix = "..." if len(first_user_message) > 30 else ""
            self.title = f"{self.reference} - {preview}{suffix}"
        else:
            self.title = self.reference

    def to_json(self):
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "title": self.title,
            "reference": self.reference,
            "scope": self.scope.value,
            "scripture_id": self.scripture_id,
            "book": self.book,
            "chapter": self.chapter,
            "verse_range": list(self.verse_range) if self.verse_range else None,
            "messages": [m.to_json() for m in self.messages]
        }
