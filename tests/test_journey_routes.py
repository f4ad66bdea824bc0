"""Tests for the Journey JSON API."""

import pytest

from app import create_app

RECORD = {
    'verse_id': 'kjv-psalms-23-1',
    'reference': 'Psalms 23:1',
    'verse_text': 'The LORD is my shepherd; I shall not want.',
    'type': 'highlight',
    'text_name': 'King James Bible',
    'created_at': '2024-03-10T08:00:00Z'
}

SESSION = {
    'reference': 'John 3:16-17',
    'scope': 'range',
    'scripture_id': 'kjv',
    'book': 'John',
    'chapter': 3,
    'verse_range': [16, 17],
    'messages': [
        {'role': 'assistant', 'text': 'Welcome to guided study.'},
        {'role': 'user', 'text': 'Why does this verse matter so much to readers?'},
    ],
    'created_at': '2024-03-11T08:00:00Z',
    'updated_at': '2024-03-11T09:00:00Z'
}

REF = {
    'scripture_id': 'kjv',
    'book_id': 'john',
    'chapter': 3,
    'verse_start': 16,
    'verse_end': 17,
    'display': 'John 3:16-17'
}


@pytest.fixture
def seeded(client):
    record = client.post('/api/journey/records', json=RECORD).get_json()
    session = client.post('/api/journey/sessions', json=SESSION).get_json()
    insight = client.post('/api/journey/insights', json={
        'body': 'Love as the motive of sending',
        'session_id': session['id'],
        'ref': REF
    }).get_json()
    return {'record': record, 'session': session, 'insight': insight}


def test_feed_merges_all_sources(client, seeded):
    items = client.get('/api/journey/items').get_json()

    assert {i['kind'] for i in items} == {'highlight', 'guided_session', 'guided_insight'}
    # most recent first; the insight was created just now
    assert items[0]['id'] == seeded['insight']['id']
    assert items[-1]['id'] == seeded['record']['id']


def test_session_title_defaults_from_first_user_message(seeded):
    assert seeded['session']['title'] == 'John 3:16-17 - Why does this verse matter so ...'


def test_malformed_record_is_not_listed(client):
    response = client.post('/api/journey/records', json={**RECORD, 'verse_id': 'kjv-psalms'})

    assert response.status_code == 201
    assert client.get('/api/journey/items').get_json() == []


def test_get_item_and_session(client, seeded):
    session_id = seeded['session']['id']

    item = client.get(f"/api/journey/items/{session_id}").get_json()
    assert item['kind'] == 'guided_session'
    assert item['body'] == 'Why does this verse matter so much to readers?'
    assert item['ref']['book_id'] == 'john'

    session = client.get(f"/api/journey/items/{session_id}/session").get_json()
    assert session['id'] == session_id

    record_id = seeded['record']['id']
    assert client.get(f"/api/journey/items/{record_id}/session").status_code == 404
    assert client.get('/api/journey/items/missing').status_code == 404


def test_insight_default_title(seeded):
    assert seeded['insight']['title'] == 'Insight from John 3:16-17'
    assert seeded['insight']['source_session_id'] == seeded['session']['id']


def test_insight_edit_pin_and_delete(client, seeded):
    insight_id = seeded['insight']['id']

    edited = client.put(f"/api/journey/insights/{insight_id}", json={'body': 'Revised'})
    assert edited.status_code == 200
    assert edited.get_json()['body'] == 'Revised'

    pinned = client.post(f"/api/journey/insights/{insight_id}/pin")
    assert pinned.get_json()['is_pinned'] is True

    deleted = client.delete(f"/api/journey/insights/{insight_id}")
    assert deleted.status_code == 200
    assert client.get(f"/api/journey/items/{insight_id}").status_code == 404
    assert client.delete(f"/api/journey/insights/{insight_id}").status_code == 404


def test_pinning_a_derived_item_is_refused(client, seeded):
    record_id = seeded['record']['id']

    response = client.post(f"/api/journey/insights/{record_id}/pin")

    assert response.status_code == 404
    assert client.get(f"/api/journey/items/{record_id}").get_json()['is_pinned'] is False


def test_editing_a_derived_item_is_refused(client, seeded):
    record_id = seeded['record']['id']

    response = client.put(f"/api/journey/insights/{record_id}", json={'body': 'nope'})

    assert response.status_code == 404


def test_insights_survive_restart(client, seeded, database_url):
    restarted = create_app({'TESTING': True, 'DATABASE_URL': database_url}).test_client()

    items = restarted.get('/api/journey/items').get_json()

    assert [i['id'] for i in items] == [seeded['insight']['id']]


def test_filters_round_trip(client, seeded):
    response = client.put('/api/journey/filters', json={'kinds': ['highlight'], 'sort': 'oldest'})
    assert response.get_json()['kinds'] == ['highlight']

    items = client.get('/api/journey/items').get_json()
    assert [i['id'] for i in items] == [seeded['record']['id']]

    stats = client.get('/api/journey/stats').get_json()
    assert stats['has_active_filters'] is True
    assert stats['active_filter_count'] == 2

    cleared = client.delete('/api/journey/filters').get_json()
    assert cleared == {
        'search_text': '', 'kinds': [], 'scripture_ids': [], 'book_ids': [],
        'sort': 'recent', 'pinned_only': False
    }
    assert len(client.get('/api/journey/items').get_json()) == 3


def test_search_filter(client, seeded):
    client.put('/api/journey/filters', json={'search_text': 'SHEPHERD'})

    items = client.get('/api/journey/items').get_json()

    assert [i['id'] for i in items] == [seeded['record']['id']]


def test_invalid_filter_payload(client):
    response = client.put('/api/journey/filters', json={'sort': 'alphabetical'})

    assert response.status_code == 400
    assert response.get_json()['error'] == 'Invalid request payload'


def test_stats(client, seeded):
    stats = client.get('/api/journey/stats').get_json()

    assert stats['counts'] == {
        'highlight': 1, 'note': 0, 'guided_session': 1, 'guided_insight': 1, 'bookmark': 0
    }
    assert stats['labels']['guided_session'] == 'Sessions'
    assert stats['total'] == 3
    assert stats['scripture_ids'] == ['kjv']
    assert stats['book_ids'] == ['john', 'psalms']
    assert client.get('/api/journey/stats?scripture_id=quran').get_json()['book_ids'] == []


def test_groups(client, seeded):
    groups = client.get('/api/journey/groups').get_json()

    assert groups[0]['group'] == 'today'
    assert groups[0]['label'] == 'Today'
    assert [i['id'] for i in groups[0]['items']] == [seeded['insight']['id']]
    assert groups[-1]['group'] == 'earlier'


def test_upstream_removal(client, seeded):
    record_id = seeded['record']['id']
    session_id = seeded['session']['id']

    assert client.delete(f"/api/journey/records/{record_id}").status_code == 200
    assert client.delete(f"/api/journey/sessions/{session_id}").status_code == 200
    assert client.delete(f"/api/journey/records/{record_id}").status_code == 404

    items = client.get('/api/journey/items').get_json()
    assert [i['kind'] for i in items] == ['guided_insight']


def test_session_upsert_replaces_by_id(client, seeded):
    session_id = seeded['session']['id']

    client.post('/api/journey/sessions', json={**SESSION, 'id': session_id, 'title': 'Renamed'})

    sessions = [i for i in client.get('/api/journey/items').get_json() if i['kind'] == 'guided_session']
    assert len(sessions) == 1
    assert sessions[0]['title'] == 'Renamed'


@pytest.mark.parametrize("path,payload", [
    ('/api/journey/records', {'verse_id': 'kjv-psalms-23-1'}),
    ('/api/journey/sessions', {**SESSION, 'verse_range': [5, 2]}),
    ('/api/journey/insights', {'body': 'No ref', 'session_id': 's'}),
])
def test_validation_errors(client, path, payload):
    response = client.post(path, json=payload)

    assert response.status_code == 400
    assert response.get_json()['details']


def test_missing_json_payload(client):
    response = client.post('/api/journey/insights', data='x', content_type='text/plain')

    assert response.status_code == 400
