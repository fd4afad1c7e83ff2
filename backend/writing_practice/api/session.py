import time

from flask import Blueprint, current_app, jsonify, request

from writing_practice.services.session import EndReason, PracticeError, SessionLockedError
from writing_practice.services.session.launcher import get_session, launch_session
from writing_practice.services.session.prompts import validate_custom_prompt

session_api = Blueprint('session', __name__)


@session_api.errorhandler(PracticeError)
def handle_practice_error(exc: PracticeError):
    return jsonify({'error': exc.message}), exc.status_code


@session_api.route('/state', methods=['GET'])
def get_state():
    return jsonify(get_session().snapshot())


@session_api.route('/start', methods=['POST'])
def start_session():
    data = request.get_json(silent=True) or {}
    # Debounce double clicks on the start buttons
    try:
        debounce_ms = int(current_app.config.get('START_DEBOUNCE_MS', 0))
    except (TypeError, ValueError):
        debounce_ms = 0
    if debounce_ms > 0:
        now = time.time() * 1000.0
        last_actions = current_app.extensions.setdefault('start_debounce', {})
        last = last_actions.get('start', 0)
        if now - last < debounce_ms:
            return jsonify({'message': 'debounced'}), 202
        last_actions['start'] = now

    if 'prompt' in data:
        prompt = validate_custom_prompt(data.get('prompt'))
    else:
        prompt = current_app.extensions['prompt_source'].get_random_prompt()

    launch_session(current_app._get_current_object(), prompt)
    return jsonify(get_session().snapshot()), 201


@session_api.route('/response', methods=['POST'])
def edit_response():
    data = request.get_json(silent=True) or {}
    text = data.get('text')
    if not isinstance(text, str):
        return jsonify({'error': 'text is required'}), 400
    result = get_session().edit_response(text)
    if not result.accepted:
        raise SessionLockedError('Response is locked.')
    payload = get_session().snapshot()
    payload['clamped'] = result.clamped
    return jsonify(payload)


@session_api.route('/submit', methods=['POST'])
def submit():
    # Idempotent: a second submit returns the locked state unchanged
    get_session().end_session(EndReason.SUBMITTED)
    return jsonify(get_session().snapshot())


@session_api.route('/reset', methods=['POST'])
def reset():
    get_session().reset_to_landing()
    return jsonify(get_session().snapshot())


@session_api.route('/preview', methods=['POST'])
def toggle_preview():
    get_session().toggle_preview()
    return jsonify(get_session().snapshot())


@session_api.route('/copy', methods=['POST'])
def record_copy():
    data = request.get_json(silent=True) or {}
    if 'ok' not in data:
        return jsonify({'error': 'ok is required'}), 400
    get_session().record_copy_result(bool(data.get('ok')))
    return jsonify(get_session().snapshot())


@session_api.route('/prompts/random', methods=['GET'])
def random_prompt():
    return jsonify({'prompt': current_app.extensions['prompt_source'].get_random_prompt()})
