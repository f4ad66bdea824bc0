# models/journey_record.py
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def _utcnow():
    return datetime.now(timezone.utc)


class RecordType(str, Enum):
    HIGHLIGHT = "highlight"
    NOTE = "note"


@dataclass
class JourneyRecord:
    """A highlight or note captured while reading.

    ``verse_id`` is the composite ``scripture-book-chapter-verse`` identifier
    of the highlighted verse.
    """
    verse_id: str
    reference: str
    verse_text: str
    type: RecordType
    religion: str = ""
    text_name: str = ""
    note_text: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=_utcnow)

    def to_json(self):
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "verse_id": self.verse_id,
            "religion": self.religion,
            "text_name": self.text_name,
            "reference": self.reference,
            "verse_text": self.verse_text,
            "note_text": self.note_text,
            "type": self.type.value
        }
