# routes/guided_study.py
from flask import Blueprint, request, jsonify, current_app
import logging

from utils.llm import (
    build_guided_study_messages,
    call_chat_completion,
    extract_reply,
    filter_history,
)

guided_study_bp = Blueprint('guided_study', __name__)
logger = logging.getLogger(__name__)

UPSTREAM_ERROR_LIMIT = 500


def _field(data, name, default):
    # JSON null counts as absent
    value = data.get(name)
    return default if value is None else value


@guided_study_bp.route('/health', methods=['GET'])
def health():
    return jsonify({'ok': True})


@guided_study_bp.route('/guided-study', methods=['GET', 'POST'])
def guided_study():
    """
    Proxies a Guided Study chat turn to the upstream chat-completion API.
    GET answers like the health check so the endpoint can be probed directly.
    """
    if request.method == 'GET':
        return jsonify({'ok': True})

    api_key = current_app.config.get('OPENAI_API_KEY')
    if not api_key:
        logger.error("OPENAI_API_KEY is not configured")
        return jsonify({'error': 'Server misconfiguration'}), 500

    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}

        scripture_ref = str(_field(data, 'scriptureRef', ''))
        passage_text = str(_field(data, 'passageText', ''))
        locale = str(_field(data, 'locale', 'en-US'))
        history = filter_history(_field(data, 'messages', []))

        messages = build_guided_study_messages(scripture_ref, passage_text, locale, history)

        upstream = call_chat_completion(
            messages,
            api_key=api_key,
            api_url=current_app.config['OPENAI_API_URL'],
            model=current_app.config['GUIDED_STUDY_MODEL'],
            timeout=current_app.config['UPSTREAM_TIMEOUT']
        )

        if not 200 <= upstream.status_code < 300:
            logger.warning(f"Upstream returned {upstream.status_code} for {scripture_ref or 'unscoped'} request")
            return jsonify({'error': upstream.text[:UPSTREAM_ERROR_LIMIT]}), upstream.status_code

        reply = extract_reply(upstream.json())
        return jsonify({'replyText': reply})

    except Exception as e:
        logger.error(f"Guided study proxy failed: {str(e)}", exc_info=True)
        return jsonify({'error': 'Proxy request failed'}), 500
