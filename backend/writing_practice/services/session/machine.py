import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .capture import CaptureHandle, CaptureMediator
from .countdown import Clock, Countdown, seconds_until, wall_clock_ms
from .governor import EditResult, InputGovernor
from .text import count_words, format_time_mmss

TIMEUP_BANNER = "Time’s up. Response locked."
SUBMITTED_BANNER = "Submitted. Response locked."
COPY_OK_MESSAGE = "Copied."
COPY_FAIL_MESSAGE = "Copy failed. Select and copy manually."


class Screen(str, Enum):
    LANDING = 'landing'
    REQUESTING = 'requesting'
    PRACTICE = 'practice'


class EndReason(str, Enum):
    NONE = 'none'
    SUBMITTED = 'submitted'
    TIMEUP = 'timeup'


class PracticeSession:
    """Lifecycle of the single live practice attempt.

    Screens move ``landing -> requesting -> practice``; a practice session is
    locked once ``end_reason`` leaves ``none``, which happens at most once per
    session. Every mutation (commands, edits, ticks, capture completion) runs
    under one re-entrant lock, and every tick or capture completion carries
    the ``session_id`` it was issued for so leftovers from an earlier session
    are dropped.

    ``scheduler`` needs ``every(interval_ms, callback)`` and ``cancel(task)``.
    Without one the host must call ``tick()`` itself.
    """

    def __init__(
        self,
        *,
        total_seconds: int = 600,
        word_target: int = 300,
        hard_max_words: int = 350,
        tick_interval_ms: int = 250,
        clock: Optional[Clock] = None,
        scheduler=None,
        capture: Optional[CaptureMediator] = None,
        on_change: Optional[Callable[[Dict[str, Any]], None]] = None,
        logger: Optional[logging.Logger] = None,
        heartbeat_sec: int = 0,
        copy_ok_ms: int = 1500,
        copy_fail_ms: int = 2500,
    ):
        if total_seconds < 1:
            raise ValueError(f'total_seconds must be positive, got {total_seconds}')
        if tick_interval_ms < 1:
            raise ValueError(f'tick_interval_ms must be positive, got {tick_interval_ms}')
        self.total_seconds = int(total_seconds)
        self.tick_interval_ms = int(tick_interval_ms)
        self.governor = InputGovernor(word_target, hard_max_words)
        self.clock = clock or wall_clock_ms
        self.scheduler = scheduler
        self.logger = logger or logging.getLogger(__name__)
        self.capture = capture or CaptureMediator(logger=self.logger)
        self.on_change = on_change
        self.heartbeat_sec = int(heartbeat_sec or 0)
        self.copy_ok_ms = copy_ok_ms
        self.copy_fail_ms = copy_fail_ms

        self._lock = threading.RLock()
        self._session_id = 0
        self._countdown: Optional[Countdown] = None
        self._tick_task = None
        self._clear_fields()

    # ---- state ----

    def _clear_fields(self) -> None:
        self.screen = Screen.LANDING
        self.prompt = ''
        self.response_text = ''
        self.deadline_ms: Optional[float] = None
        self.end_reason = EndReason.NONE
        self.final_seconds_remaining: Optional[int] = None
        self.resource: Optional[CaptureHandle] = None
        self.advisory: Optional[str] = None
        self.preview_visible = True
        self._pending_prompt = ''
        self._copy_status: Optional[str] = None
        self._copy_status_until: Optional[float] = None
        self._last_heartbeat: Optional[int] = None
        self._countdown = None

    @property
    def session_id(self) -> int:
        return self._session_id

    @property
    def locked(self) -> bool:
        return self.end_reason is not EndReason.NONE

    @property
    def running(self) -> bool:
        return self.screen is Screen.PRACTICE and not self.locked

    @property
    def seconds_remaining(self) -> int:
        if self.locked:
            return self.final_seconds_remaining
        if self.deadline_ms is not None:
            return seconds_until(self.deadline_ms, self.clock())
        return self.total_seconds

    @property
    def copy_status(self) -> Optional[str]:
        if self._copy_status_until is not None and self.clock() >= self._copy_status_until:
            return None
        return self._copy_status

    # ---- lifecycle ----

    def start_session(self, prompt: str) -> bool:
        """Start a new attempt, acquiring capture inline.

        Hosts that want acquisition off the request path call
        ``begin_start`` and later ``finish_start`` with the same token.
        """
        token = self.begin_start(prompt)
        handle, advisory = self.capture.acquire()
        return self.finish_start(token, handle, advisory)

    def begin_start(self, prompt: str) -> int:
        with self._lock:
            self._teardown()
            self._session_id += 1
            self._clear_fields()
            self._pending_prompt = prompt
            self.screen = Screen.REQUESTING
            token = self._session_id
            self.logger.info(f"[session-requesting] session={token}")
        self._notify()
        return token

    def finish_start(self, token: int, handle: Optional[CaptureHandle], advisory: Optional[str] = None) -> bool:
        """Enter practice if ``token`` still names the pending session.

        A handle that resolves for a session the user already left is
        released on the spot.
        """
        with self._lock:
            if token != self._session_id or self.screen is not Screen.REQUESTING:
                self.logger.info(f"[capture-stale] token={token} current={self._session_id} screen={self.screen.value}")
                self.capture.release(handle)
                return False
            self.resource = handle
            self.advisory = advisory
            self.prompt = self._pending_prompt
            self._pending_prompt = ''
            self.deadline_ms = self.clock() + self.total_seconds * 1000
            self.screen = Screen.PRACTICE
            self._countdown = Countdown(self.deadline_ms, self.clock)
            self._countdown.tick()
            self._schedule_ticks(token)
            self.logger.info(
                f"[session-start] session={token} duration={self.total_seconds}s "
                f"deadline={self.deadline_ms:.0f} capture={'yes' if handle is not None else 'no'}"
            )
        self._notify()
        return True

    def end_session(self, reason) -> bool:
        """Lock the session. Only the first call per session has any effect."""
        reason = EndReason(reason)
        if reason is EndReason.NONE:
            raise ValueError('end reason must be submitted or timeup')
        with self._lock:
            if self.screen is not Screen.PRACTICE or self.locked:
                return False
            self._end(reason)
        self._notify()
        return True

    def reset_to_landing(self) -> None:
        with self._lock:
            self._teardown()
            self._session_id += 1
            self._clear_fields()
            self.logger.info(f"[session-reset] next={self._session_id}")
        self._notify()

    def close(self) -> None:
        """Release everything without notifying; used on host teardown."""
        with self._lock:
            self._teardown()
            self._session_id += 1
            self._clear_fields()

    # ---- ticks ----

    def tick(self) -> None:
        self._on_tick(self._session_id)

    def _schedule_ticks(self, token: int) -> None:
        self._cancel_ticks()
        if self.scheduler is None:
            return
        self._tick_task = self.scheduler.every(self.tick_interval_ms, lambda: self._on_tick(token))
        self.logger.info(f"[timer-set] session={token} interval={self.tick_interval_ms}ms")

    def _cancel_ticks(self) -> None:
        if self._tick_task is not None and self.scheduler is not None:
            self.scheduler.cancel(self._tick_task)
        self._tick_task = None

    def _on_tick(self, token: int) -> None:
        with self._lock:
            if token != self._session_id or self._countdown is None or self.locked:
                self.logger.debug(f"[timer-stale] token={token} current={self._session_id}")
                return
            before = self._countdown.seconds_remaining
            fired = self._observe_expiry()
            after = self._countdown.seconds_remaining if self._countdown else 0
            self._heartbeat(after)
        if fired or after != before:
            self._notify()

    def _observe_expiry(self) -> bool:
        if self._countdown is None or self.locked:
            return False
        if self._countdown.tick():
            self.logger.info(f"[timer-fire] session={self._session_id} deadline={self.deadline_ms:.0f}")
            self._end(EndReason.TIMEUP)
            return True
        return False

    def _heartbeat(self, remaining: int) -> None:
        if self.heartbeat_sec <= 0 or remaining == self._last_heartbeat:
            return
        if remaining % self.heartbeat_sec == 0:
            self._last_heartbeat = remaining
            self.logger.info(f"[timer-heartbeat] session={self._session_id} remaining={remaining}s")

    # ---- termination ----

    def _end(self, reason: EndReason) -> None:
        if reason is EndReason.TIMEUP:
            final = 0
        else:
            final = seconds_until(self.deadline_ms, self.clock())
        self._cancel_ticks()
        self._release_resource()
        self.end_reason = reason
        self.final_seconds_remaining = final
        if self._countdown is not None:
            self._countdown.seconds_remaining = final
        self.logger.info(f"[session-end] session={self._session_id} reason={reason.value} remaining={final}s")

    def _release_resource(self) -> None:
        handle, self.resource = self.resource, None
        self.capture.release(handle)

    def _teardown(self) -> None:
        self._cancel_ticks()
        self._release_resource()

    # ---- input ----

    def edit_response(self, text: str) -> EditResult:
        with self._lock:
            expired = self._observe_expiry()
            result = self.governor.apply(text, locked=not self.running)
            if not result.accepted:
                self.logger.debug(f"[edit-rejected] session={self._session_id} screen={self.screen.value}")
            else:
                if result.clamped:
                    self.logger.info(
                        f"[edit-clamped] session={self._session_id} words={count_words(text)} stored={result.word_count} cap={self.governor.hard_max_words}"
                    )
                self.response_text = result.text
        if result.accepted or expired:
            self._notify()
        return result

    # ---- peripheral ----

    def toggle_preview(self) -> bool:
        with self._lock:
            if self.resource is not None:
                self.preview_visible = not self.preview_visible
            visible = self.preview_visible
        self._notify()
        return visible

    def record_copy_result(self, ok: bool) -> str:
        with self._lock:
            if ok:
                self._copy_status, hold = COPY_OK_MESSAGE, self.copy_ok_ms
            else:
                self._copy_status, hold = COPY_FAIL_MESSAGE, self.copy_fail_ms
            self._copy_status_until = self.clock() + hold
            status = self._copy_status
        self._notify()
        return status

    # ---- presentation ----

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            words = count_words(self.response_text)
            remaining = self.seconds_remaining
            time_used = None
            if self.final_seconds_remaining is not None:
                time_used = max(0, self.total_seconds - self.final_seconds_remaining)
            banner = None
            if self.end_reason is EndReason.TIMEUP:
                banner = TIMEUP_BANNER
            elif self.end_reason is EndReason.SUBMITTED:
                banner = SUBMITTED_BANNER
            return {
                'session_id': self._session_id,
                'screen': self.screen.value,
                'prompt': self.prompt,
                'response_text': self.response_text,
                'total_seconds': self.total_seconds,
                'seconds_remaining': remaining,
                'time_display': format_time_mmss(remaining),
                'running': self.running,
                'locked': self.locked,
                'end_reason': self.end_reason.value,
                'final_seconds_remaining': self.final_seconds_remaining,
                'time_used_seconds': time_used,
                'time_used_display': format_time_mmss(time_used) if time_used is not None else '—',
                'status_banner': banner,
                'word_count': words,
                'character_count': len(self.response_text),
                'word_target': self.governor.word_target,
                'hard_max_words': self.governor.hard_max_words,
                'over_target': words > self.governor.word_target,
                'advisory': self.advisory,
                'has_capture': self.resource is not None,
                'preview_visible': self.preview_visible,
                'copy_status': self.copy_status,
            }

    def _notify(self) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change(self.snapshot())
        except Exception:
            self.logger.exception("[notify-failed] state listener raised")
