import logging
from typing import Callable, Optional


class ScheduledTask:
    """Handle returned by ``every``; cancelling it stops further callbacks."""

    __slots__ = ('interval_ms', 'callback', 'cancelled')

    def __init__(self, interval_ms: int, callback: Callable[[], None]):
        self.interval_ms = interval_ms
        self.callback = callback
        self.cancelled = False


class BackgroundScheduler:
    """Periodic callbacks on Socket.IO background tasks.

    Each ``every`` call starts one worker that sleeps ``interval_ms`` between
    callbacks until its task is cancelled. The worker re-checks the flag after
    waking, so a cancel that lands mid-sleep never produces a late callback.
    """

    def __init__(self, socketio, logger: Optional[logging.Logger] = None):
        self.socketio = socketio
        self.logger = logger or logging.getLogger(__name__)

    def every(self, interval_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(interval_ms, callback)

        def _worker(t: ScheduledTask):
            delay = t.interval_ms / 1000.0
            while not t.cancelled:
                self.socketio.sleep(delay)
                if t.cancelled:
                    return
                try:
                    t.callback()
                except Exception:
                    self.logger.exception("[timer-error] interval callback failed")

        self.socketio.start_background_task(_worker, task)
        return task

    def cancel(self, task: Optional[ScheduledTask]) -> None:
        if task is not None:
            task.cancelled = True
