import os
import random
import sys
import pytest

# Ensure the backend root (containing the `writing_practice` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from writing_practice import create_app, socketio
from writing_practice.services.session import PracticeSession
from writing_practice.services.session.capture import CaptureHandle, CaptureMediator, CaptureTrack
from writing_practice.services.session.prompts import PromptSource
from writing_practice.services.session.scheduler import ScheduledTask


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    LOG_LEVEL = 'DEBUG'
    CORS_ORIGINS = []
    SESSION_DURATION_SEC = 600
    TICK_INTERVAL_MS = 250
    WORD_TARGET = 300
    HARD_MAX_WORDS = 350
    COPY_OK_STATUS_MS = 1500
    COPY_FAIL_STATUS_MS = 2500
    CAPTURE_ENABLED = False
    OWNER_GRACE_SEC = 0.0
    START_DEBOUNCE_MS = 0
    TIMER_HEARTBEAT_SEC = 0


class FakeClock:
    """Millisecond wall clock that only moves when told to."""

    def __init__(self, start_ms: float = 1_700_000_000_000.0):
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


class ManualScheduler:
    """Collects interval callbacks; tests fire them with run_pending()."""

    def __init__(self):
        self.tasks = []

    def every(self, interval_ms, callback):
        task = ScheduledTask(interval_ms, callback)
        self.tasks.append(task)
        return task

    def cancel(self, task):
        if task is not None:
            task.cancelled = True

    @property
    def active(self):
        return [t for t in self.tasks if not t.cancelled]

    def run_pending(self, times: int = 1) -> None:
        for _ in range(times):
            for task in list(self.tasks):
                if not task.cancelled:
                    task.callback()


class FakeDevice:
    def __init__(self):
        self.release_calls = 0

    def release(self):
        self.release_calls += 1


class FakeCamera:
    """Capture source handing out fake devices, or refusing like a denied prompt."""

    def __init__(self, deny: bool = False):
        self.deny = deny
        self.devices = []
        self.requests = []

    def request(self, constraints):
        self.requests.append(constraints)
        if self.deny:
            raise PermissionError('Permission denied')
        device = FakeDevice()
        self.devices.append(device)
        return CaptureHandle([CaptureTrack(device)])

    @property
    def open_devices(self):
        return [d for d in self.devices if d.release_calls == 0]


def make_words(n: int, prefix: str = 'w') -> str:
    return ' '.join(f'{prefix}{i}' for i in range(1, n + 1))


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def camera():
    return FakeCamera()


@pytest.fixture()
def notifications():
    return []


@pytest.fixture()
def practice(clock, scheduler, camera, notifications):
    session = PracticeSession(
        total_seconds=600,
        word_target=300,
        hard_max_words=350,
        tick_interval_ms=250,
        clock=clock,
        scheduler=scheduler,
        capture=CaptureMediator(camera),
        on_change=notifications.append,
    )
    yield session
    session.close()


@pytest.fixture()
def flask_app(clock, scheduler, camera):
    from writing_practice import socketio_events
    socketio_events._sid_to_ctx.clear()
    socketio_events._owner_count = 0
    application = create_app(
        TestConfig,
        clock=clock,
        scheduler=scheduler,
        capture=CaptureMediator(camera),
        prompt_source=PromptSource(rng=random.Random(7)),
    )
    with application.app_context():
        yield application
        application.extensions['practice_session'].close()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
