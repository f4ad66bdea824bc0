# utils/journey_mapper.py
import logging

from models import RecordType
from schemas.journey_schemas import ItemKind, UnifiedItem
from utils.scripture_refs import from_identifier_string, from_session

logger = logging.getLogger(__name__)


def build_unified_items(journey_records, guided_sessions, guided_insights):
    """Merge highlights/notes, guided sessions and saved insights into one list.

    Records whose verse id cannot be parsed are dropped. Output keeps input
    order: records, then sessions, then insights.
    """
    items = []

    skipped = 0
    for record in journey_records:
        ref = from_identifier_string(record.verse_id, record.reference)
        if ref is None:
            skipped += 1
            continue
        items.append(UnifiedItem(
            id=record.id,
            kind=ItemKind.HIGHLIGHT if record.type == RecordType.HIGHLIGHT else ItemKind.NOTE,
            ref=ref,
            body=record.note_text,
            quote=record.verse_text,
            created_at=record.created_at,
            updated_at=record.created_at,  # records are never edited
            text_name=record.text_name
        ))
    if skipped:
        logger.debug(f"Skipped {skipped} journey records with unparseable verse ids")

    for session in guided_sessions:
        first_message = session.first_user_message()
        items.append(UnifiedItem(
            id=session.id,
            kind=ItemKind.GUIDED_SESSION,
            ref=from_session(session),
            title=session.title,
            body=first_message.text if first_message else None,
            created_at=session.created_at,
            updated_at=session.updated_at
        ))

    items.extend(guided_insights)
    return items
