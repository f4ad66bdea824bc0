# utils/insight_storage.py
import logging

from sqlalchemy.exc import SQLAlchemyError

from config import Config
from database import get_db_session
from models import KeyValueEntry
from schemas.journey_schemas import InsightBlob

logger = logging.getLogger(__name__)


class InsightStorage:
    """Stores the whole insight collection as one JSON blob under a fixed key.

    Both directions are best-effort: failures are logged and never raised.
    """

    def __init__(self, key=Config.JOURNEY_INSIGHTS_KEY):
        self.key = key

    def load(self):
        try:
            with get_db_session() as db:
                entry = db.get(KeyValueEntry, self.key)
                raw = entry.value if entry else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to read insights from '{self.key}': {str(e)}")
            return []

        if raw is None:
            return []

        try:
            blob = InsightBlob.model_validate_json(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable insights blob '{self.key}': {str(e)}")
            return []

        logger.info(f"Loaded {len(blob.insights)} insights from '{self.key}'")
        return blob.insights

    def save(self, insights):
        try:
            raw = InsightBlob(insights=list(insights)).model_dump_json()
            with get_db_session() as db:
                entry = db.get(KeyValueEntry, self.key)
                if entry:
                    entry.value = raw
                else:
                    db.add(KeyValueEntry(key=self.key, value=raw))
        except (SQLAlchemyError, ValueError) as e:
            logger.error(f"Failed to persist insights to '{self.key}': {str(e)}")
