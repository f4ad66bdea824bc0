"""
Shared fixtures for the journey backend tests.

Every test gets its own SQLite file under pytest's tmp_path.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app import create_app
from database import init_db
from models import GuidedSession, GuidedSessionMessage, JourneyRecord, MessageRole, RecordType, SessionScope

BASE_TIME = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now=BASE_TIME):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'journey-test.db'}"


@pytest.fixture
def db_engine(database_url):
    return init_db(database_url)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def app(database_url):
    return create_app({
        'TESTING': True,
        'DATABASE_URL': database_url,
        'OPENAI_API_KEY': 'test-key',
        'OPENAI_API_URL': 'https://upstream.test/v1/chat/completions',
    })


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_record():
    def _make(verse_id="kjv-genesis-1-1", reference="Genesis 1:1", record_type=RecordType.HIGHLIGHT,
              verse_text="In the beginning God created the heaven and the earth.",
              note_text=None, created_at=BASE_TIME, text_name="King James Bible"):
        return JourneyRecord(
            verse_id=verse_id,
            reference=reference,
            verse_text=verse_text,
            type=record_type,
            religion="christianity",
            text_name=text_name,
            note_text=note_text,
            created_at=created_at
        )
    return _make


@pytest.fixture
def make_session():
    def _make(reference="John 3:16-17", book="John", chapter=3, verse_range=(16, 17),
              messages=None, updated_at=BASE_TIME, scripture_id="kjv"):
        return GuidedSession(
            reference=reference,
            scope=SessionScope.RANGE if verse_range else SessionScope.CHAPTER,
            scripture_id=scripture_id,
            book=book,
            chapter=chapter,
            verse_range=verse_range,
            messages=messages if messages is not None else [
                GuidedSessionMessage(role=MessageRole.USER, text="What does 'world' mean here?"),
                GuidedSessionMessage(role=MessageRole.ASSISTANT, text="Interpreters differ..."),
            ],
            created_at=updated_at - timedelta(hours=1),
            updated_at=updated_at
        )
    return _make
