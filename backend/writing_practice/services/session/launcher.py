from flask import current_app

from writing_practice import socketio
from .machine import PracticeSession


def get_session(app=None) -> PracticeSession:
    app = app or current_app
    return app.extensions['practice_session']


def launch_session(app, prompt: str) -> int:
    """Start a session for ``prompt`` and return its id.

    - Enters ``requesting`` immediately so clients can show the permission step
    - Acquires the webcam on a background task; the session proceeds either way
    - Runs inline in TESTING mode for deterministic control flow
    """
    session = get_session(app)
    token = session.begin_start(prompt)

    def _worker(expected_token: int):
        handle, advisory = session.capture.acquire()
        if not session.finish_start(expected_token, handle, advisory):
            app.logger.info(f"[session-abandoned] session={expected_token} superseded before capture resolved")

    if app.config.get('TESTING'):
        _worker(token)
    else:
        socketio.start_background_task(_worker, token)
    return token
