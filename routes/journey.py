# routes/journey.py
from flask import Blueprint, request, jsonify, current_app
from pydantic import ValidationError
import logging

from models import GuidedSession, GuidedSessionMessage, JourneyRecord
from schemas.journey_schemas import (
    FilterUpdate,
    GuidedSessionCreate,
    InsightBodyUpdate,
    InsightCreate,
    JourneyRecordCreate,
)

journey_bp = Blueprint('journey', __name__)
logger = logging.getLogger(__name__)


def _store():
    return current_app.extensions['journey_store']


def _app_state():
    return current_app.extensions['app_state']


def _item_json(item):
    return item.model_dump(mode='json')


def _validation_error(e):
    return jsonify({
        'error': 'Invalid request payload',
        'details': e.errors(include_url=False, include_context=False)
    }), 400


def _payload():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


# --- Feed ---

@journey_bp.route('/items', methods=['GET'])
def list_items():
    try:
        items = _store().filtered_items
        return jsonify([_item_json(i) for i in items])
    except Exception as e:
        logger.error(f"Error listing journey items: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to list journey items'}), 500


@journey_bp.route('/items/<item_id>', methods=['GET'])
def get_item(item_id):
    item = _store().item(item_id)
    if item is None:
        return jsonify({'error': 'Item not found'}), 404
    return jsonify(_item_json(item))


@journey_bp.route('/items/<item_id>/session', methods=['GET'])
def get_item_session(item_id):
    store = _store()
    item = store.item(item_id)
    session = store.guided_session(item) if item else None
    if session is None:
        return jsonify({'error': 'Guided session not found'}), 404
    return jsonify(session.to_json())


@journey_bp.route('/groups', methods=['GET'])
def list_groups():
    try:
        groups = _store().grouped_by_time()
        return jsonify([{
            'group': group.value,
            'label': group.label,
            'items': [_item_json(i) for i in items]
        } for group, items in groups])
    except Exception as e:
        logger.error(f"Error grouping journey items: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to group journey items'}), 500


@journey_bp.route('/stats', methods=['GET'])
def get_stats():
    store = _store()
    scripture_id = request.args.get('scripture_id') or None
    counts = store.counts_by_kind()
    return jsonify({
        'counts': {kind.value: count for kind, count in counts.items()},
        'labels': {kind.value: kind.display_name for kind in counts},
        'total': store.total_count,
        'scripture_ids': sorted(store.available_scripture_ids),
        'book_ids': sorted(store.available_book_ids(scripture_id)),
        'has_active_filters': store.has_active_filters,
        'active_filter_count': store.active_filter_count
    })


# --- Filters ---

@journey_bp.route('/filters', methods=['GET'])
def get_filters():
    return jsonify(_store().filters.to_json())


@journey_bp.route('/filters', methods=['PUT'])
def update_filters():
    data = _payload()
    if data is None:
        return jsonify({'error': 'Invalid JSON payload'}), 400
    try:
        update = FilterUpdate.model_validate(data)
    except ValidationError as e:
        return _validation_error(e)

    filters = _store().filters
    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    if 'search_text' in changes:
        filters.search_text = update.search_text
    if 'kinds' in changes:
        filters.selected_kinds = set(update.kinds)
    if 'scripture_ids' in changes:
        filters.selected_scripture_ids = set(update.scripture_ids)
    if 'book_ids' in changes:
        filters.selected_book_ids = set(update.book_ids)
    if 'sort' in changes:
        filters.sort = update.sort
    if 'pinned_only' in changes:
        filters.pinned_only = update.pinned_only

    return jsonify(filters.to_json())


@journey_bp.route('/filters', methods=['DELETE'])
def clear_filters():
    store = _store()
    store.clear_filters()
    return jsonify(store.filters.to_json())


# --- Insights ---

@journey_bp.route('/insights', methods=['POST'])
def create_insight():
    data = _payload()
    if data is None:
        return jsonify({'error': 'Invalid JSON payload'}), 400
    try:
        payload = InsightCreate.model_validate(data)
    except ValidationError as e:
        return _validation_error(e)

    try:
        insight = _store().save_insight(
            body=payload.body,
            session_id=payload.session_id,
            ref=payload.ref,
            title=payload.title,
            quote=payload.quote
        )
        return jsonify(_item_json(insight)), 201
    except Exception as e:
        logger.error(f"Error saving insight: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to save insight'}), 500


@journey_bp.route('/insights/<item_id>', methods=['PUT'])
def update_insight(item_id):
    data = _payload()
    if data is None:
        return jsonify({'error': 'Invalid JSON payload'}), 400
    try:
        payload = InsightBodyUpdate.model_validate(data)
    except ValidationError as e:
        return _validation_error(e)

    insight = _store().update_insight_body(item_id, payload.body)
    if insight is None:
        return jsonify({'error': 'Insight not found'}), 404
    return jsonify(_item_json(insight))


@journey_bp.route('/insights/<item_id>/pin', methods=['POST'])
def toggle_pin(item_id):
    # Only insights are pinnable; other items are left untouched
    insight = _store().toggle_pin(item_id)
    if insight is None:
        return jsonify({'error': 'Insight not found'}), 404
    return jsonify(_item_json(insight))


@journey_bp.route('/insights/<item_id>', methods=['DELETE'])
def delete_insight(item_id):
    insight = _store().delete_insight(item_id)
    if insight is None:
        return jsonify({'error': 'Insight not found'}), 404
    return jsonify({'message': 'Insight deleted successfully'})


# --- Upstream feed ---

@journey_bp.route('/records', methods=['POST'])
def add_record():
    data = _payload()
    if data is None:
        return jsonify({'error': 'Invalid JSON payload'}), 400
    try:
        payload = JourneyRecordCreate.model_validate(data)
    except ValidationError as e:
        return _validation_error(e)

    fields = payload.model_dump(exclude_none=True)
    record = JourneyRecord(**fields)
    _app_state().add_journey_record(record)
    return jsonify(record.to_json()), 201


@journey_bp.route('/records/<record_id>', methods=['DELETE'])
def remove_record(record_id):
    if not _app_state().remove_journey_record(record_id):
        return jsonify({'error': 'Record not found'}), 404
    return jsonify({'message': 'Record removed successfully'})


@journey_bp.route('/sessions', methods=['POST'])
def upsert_session():
    data = _payload()
    if data is None:
        return jsonify({'error': 'Invalid JSON payload'}), 400
    try:
        payload = GuidedSessionCreate.model_validate(data)
    except ValidationError as e:
        return _validation_error(e)

    messages = [
        GuidedSessionMessage(**m.model_dump(exclude_none=True))
        for m in payload.messages
    ]
    fields = payload.model_dump(exclude_none=True, exclude={'messages', 'verse_range'})
    session = GuidedSession(
        **fields,
        verse_range=tuple(payload.verse_range) if payload.verse_range else None,
        messages=messages
    )
    if payload.title is None:
        first_message = session.first_user_message()
        session.update_title(first_message.text if first_message else None)

    _app_state().upsert_guided_session(session)
    return jsonify(session.to_json()), 201


@journey_bp.route('/sessions/<session_id>', methods=['DELETE'])
def remove_session(session_id):
    if not _app_state().remove_guided_session(session_id):
        return jsonify({'error': 'Session not found'}), 404
    return jsonify({'message': 'Session removed successfully'})
