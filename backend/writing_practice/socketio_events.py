from flask_socketio import join_room, leave_room, emit
from flask import current_app, request
from writing_practice import socketio, PRACTICE_ROOM, WS_NAMESPACE
from writing_practice.services.session import EndReason
from writing_practice.services.session.launcher import get_session
from typing import Dict, Any
import time


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})
    emit('state_update', get_session().snapshot())


def handle_disconnect(reason=None):
    # When the last owner socket goes away the page is gone; tear the
    # session down so the webcam is not left open
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx or not ctx.get('is_session_owner'):
        return
    global _owner_count
    _owner_count = max(0, _owner_count - 1)
    app = current_app._get_current_object()
    if app.config.get('TESTING'):
        if _owner_count == 0:
            _end_practice(app)
        return
    _schedule_end_if_no_owner(app, float(app.config.get('OWNER_GRACE_SEC', 2.0)))


def handle_join_practice(data):
    global _owner_count
    is_session_owner = bool((data or {}).get('is_session_owner'))
    join_room(PRACTICE_ROOM)
    sid = _get_sid()
    previous = _sid_to_ctx.get(sid)
    already_owner = bool(previous and previous.get('is_session_owner'))
    _sid_to_ctx[sid] = {'is_session_owner': is_session_owner or already_owner}
    # A socket counts once no matter how often it re-joins
    if is_session_owner and not already_owner:
        _owner_count += 1
        _cancel_scheduled_end()
    emit('joined', {'room': PRACTICE_ROOM})
    emit('state_update', get_session().snapshot())


def handle_leave_practice(data=None):
    leave_room(PRACTICE_ROOM)
    emit('left', {'room': PRACTICE_ROOM})
    # Explicit quit by an owner: reset immediately
    ctx = _sid_to_ctx.get(_get_sid())
    if ctx and ctx.get('is_session_owner'):
        _end_practice(current_app._get_current_object())


def handle_edit_response(data):
    text = (data or {}).get('text')
    if not isinstance(text, str):
        emit('error', {'message': 'text is required'})
        return
    result = get_session().edit_response(text)
    if not result.accepted:
        emit('error', {'message': 'Response is locked.'})


def handle_submit(data=None):
    get_session().end_session(EndReason.SUBMITTED)


def handle_reset(data=None):
    get_session().reset_to_landing()


def handle_toggle_preview(data=None):
    get_session().toggle_preview()


def handle_copy_result(data):
    if 'ok' not in (data or {}):
        emit('error', {'message': 'ok is required'})
        return
    get_session().record_copy_result(bool(data.get('ok')))


def handle_ping(data):
    emit('pong', data or {})

# ---- Session owner lifecycle helpers ----

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_owner_count = 0
_end_deadline: Dict[str, float] = {}

def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore

def _end_practice(app) -> None:
    """Reset the practice session: cancels ticks and releases the webcam."""
    global _owner_count
    app.logger.info("[owner-gone] resetting practice session")
    get_session(app).reset_to_landing()
    _owner_count = 0
    _end_deadline.pop('practice', None)

def _schedule_end_if_no_owner(app, delay_sec: float = 2.0) -> None:
    if _owner_count > 0:
        return
    deadline = time.time() + delay_sec
    _end_deadline['practice'] = deadline

    def _runner(expected: float):
        sleep_for = max(0.0, expected - time.time())
        if sleep_for:
            socketio.sleep(sleep_for)
        if _owner_count == 0 and _end_deadline.get('practice') == expected:
            _end_practice(app)

    socketio.start_background_task(_runner, deadline)

def _cancel_scheduled_end() -> None:
    _end_deadline.pop('practice', None)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = [WS_NAMESPACE, '/'] if testing else [WS_NAMESPACE]
    for ns in namespaces:
        socketio.on_event('connect', handle_connect, namespace=ns)
        socketio.on_event('disconnect', handle_disconnect, namespace=ns)
        socketio.on_event('join_practice', handle_join_practice, namespace=ns)
        socketio.on_event('leave_practice', handle_leave_practice, namespace=ns)
        socketio.on_event('edit_response', handle_edit_response, namespace=ns)
        socketio.on_event('submit', handle_submit, namespace=ns)
        socketio.on_event('reset', handle_reset, namespace=ns)
        socketio.on_event('toggle_preview', handle_toggle_preview, namespace=ns)
        socketio.on_event('copy_result', handle_copy_result, namespace=ns)
        socketio.on_event('ping', handle_ping, namespace=ns)
