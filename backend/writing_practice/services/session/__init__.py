"""Practice session domain services: text metrics, countdown, capture and
the session state machine.

Everything here is transport-free so HTTP routes and socket handlers can
share it, and tests can drive it with a fake clock and scheduler.
"""

from .errors import InvalidPromptError, PracticeError, SessionLockedError
from .machine import EndReason, PracticeSession, Screen
from .text import clamp_to_max_words, count_words, format_time_mmss

__all__ = [
    'EndReason',
    'InvalidPromptError',
    'PracticeError',
    'PracticeSession',
    'Screen',
    'SessionLockedError',
    'clamp_to_max_words',
    'count_words',
    'format_time_mmss',
]
