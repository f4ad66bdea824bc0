# utils/app_state.py
import logging

logger = logging.getLogger(__name__)

JOURNEY_RECORDS = 'journey_records'
GUIDED_SESSIONS = 'guided_sessions'


class AppState:
    """Owner of the upstream journey records and guided sessions.

    Every mutation publishes a change event naming the collection that
    changed. Handlers run one at a time on the caller's thread.
    """

    def __init__(self, journey_records=None, guided_sessions=None):
        self.journey_records = list(journey_records or [])
        self.guided_sessions = list(guided_sessions or [])
        self._subscribers = []

    def subscribe(self, handler):
        """Register ``handler(source)``; returns a callable that unsubscribes it."""
        self._subscribers.append(handler)

        def unsubscribe():
            if handler in self._subscribers:
                self._subscribers.remove(handler)

        return unsubscribe

    def _publish(self, source):
        logger.debug(f"Publishing {source} change to {len(self._subscribers)} subscribers")
        for handler in list(self._subscribers):
            handler(source)

    # --- Journey records ---

    def add_journey_record(self, record):
        self.journey_records.append(record)
        self._publish(JOURNEY_RECORDS)
        return record

    def remove_journey_record(self, record_id):
        remaining = [r for r in self.journey_records if r.id != record_id]
        if len(remaining) == len(self.journey_records):
            return False
        self.journey_records = remaining
        self._publish(JOURNEY_RECORDS)
        return True

    # --- Guided sessions ---

    def get_guided_session(self, session_id):
        return next((s for s in self.guided_sessions if s.id == session_id), None)

    def upsert_guided_session(self, session):
        for index, existing in enumerate(self.guided_sessions):
            if existing.id == session.id:
                self.guided_sessions[index] = session
                break
        else:
            self.guided_sessions.append(session)
        self._publish(GUIDED_SESSIONS)
        return session

    def remove_guided_session(self, session_id):
        remaining = [s for s in self.guided_sessions if s.id != session_id]
        if len(remaining) == len(self.guided_sessions):
            return False
        self.guided_sessions = remaining
        self._publish(GUIDED_SESSIONS)
        return True
