import atexit
import logging

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)

PRACTICE_ROOM = 'practice'
WS_NAMESPACE = '/ws'


def create_app(config_class=Config, clock=None, scheduler=None, capture=None, prompt_source=None):
    """Build the Flask app and its single practice session.

    ``clock``, ``scheduler``, ``capture`` and ``prompt_source`` default to the
    production implementations; tests pass fakes so the countdown can be
    driven deterministically.
    """
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    level = getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    flask_app.logger.setLevel(level)

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from writing_practice.services.session import PracticeSession
    from writing_practice.services.session.capture import CaptureMediator, OpenCVCaptureSource
    from writing_practice.services.session.prompts import PromptSource
    from writing_practice.services.session.scheduler import BackgroundScheduler

    if capture is None:
        source = None
        if flask_app.config.get('CAPTURE_ENABLED', True):
            source = OpenCVCaptureSource(int(flask_app.config.get('CAPTURE_DEVICE_INDEX', 0)))
        capture = CaptureMediator(source, logger=flask_app.logger)

    if scheduler is None:
        # Tests drive ticks by hand unless they opt in to real background ticks
        if not flask_app.config.get('TESTING') or flask_app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
            scheduler = BackgroundScheduler(socketio, logger=flask_app.logger)

    def _broadcast(snapshot):
        socketio.emit('state_update', snapshot, to=PRACTICE_ROOM, namespace=WS_NAMESPACE)

    session = PracticeSession(
        total_seconds=int(flask_app.config.get('SESSION_DURATION_SEC', 600)),
        word_target=int(flask_app.config.get('WORD_TARGET', 300)),
        hard_max_words=int(flask_app.config.get('HARD_MAX_WORDS', 350)),
        tick_interval_ms=int(flask_app.config.get('TICK_INTERVAL_MS', 250)),
        clock=clock,
        scheduler=scheduler,
        capture=capture,
        on_change=_broadcast,
        logger=flask_app.logger,
        heartbeat_sec=int(flask_app.config.get('TIMER_HEARTBEAT_SEC', 0)),
        copy_ok_ms=int(flask_app.config.get('COPY_OK_STATUS_MS', 1500)),
        copy_fail_ms=int(flask_app.config.get('COPY_FAIL_STATUS_MS', 2500)),
    )
    flask_app.extensions['practice_session'] = session
    # Stop the countdown and let go of the camera when the process exits
    atexit.register(session.close)
    flask_app.extensions['prompt_source'] = prompt_source or PromptSource()

    # Import and register blueprints here
    from writing_practice.main import main
    flask_app.register_blueprint(main)

    from writing_practice.api.session import session_api
    flask_app.register_blueprint(session_api, url_prefix='/api/session')

    from writing_practice.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('random-prompt')
    def random_prompt_command():
        """Prints one prompt from the practice bank."""
        click.echo(flask_app.extensions['prompt_source'].get_random_prompt())

    @click.command('list-prompts')
    def list_prompts_command():
        """Prints every prompt in the practice bank."""
        for idx, text in enumerate(flask_app.extensions['prompt_source'].prompts, start=1):
            click.echo(f"{idx:2d}. {text}")

    flask_app.cli.add_command(random_prompt_command)
    flask_app.cli.add_command(list_prompts_command)

    return flask_app
