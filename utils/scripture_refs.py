# utils/scripture_refs.py
import re

from schemas.journey_schemas import ScriptureRef

_INTEGER = re.compile(r'[0-9]+')


def _parse_int(segment):
    if not _INTEGER.fullmatch(segment):
        return None
    return int(segment)


def from_identifier_string(identifier, display):
    """Build a ScriptureRef from a ``scripture-book-chapter-verse`` identifier.

    Returns None when the identifier has fewer than four segments or the
    chapter/verse segments are not integers.
    """
    parts = [p for p in identifier.split('-') if p]
    if len(parts) < 4:
        return None

    chapter = _parse_int(parts[2])
    verse = _parse_int(parts[3])
    if chapter is None or verse is None:
        return None

    return ScriptureRef(
        scripture_id=parts[0],
        book_id=parts[1],
        chapter=chapter,
        verse_start=verse,
        verse_end=verse,
        display=display
    )


def from_session(session):
    """Build a ScriptureRef from a GuidedSession. Always succeeds."""
    verse_start = verse_end = None
    if session.verse_range:
        verse_start, verse_end = session.verse_range

    return ScriptureRef(
        scripture_id=session.scripture_id,
        book_id=session.book.lower().replace(' ', '-'),
        chapter=session.chapter,
        verse_start=verse_start,
        verse_end=verse_end,
        display=session.reference
    )
