import math
import re

_WORD_RE = re.compile(r'\S+')


def count_words(text: str) -> int:
    """Number of maximal non-whitespace runs in ``text``."""
    return len(text.split())


def clamp_to_max_words(text: str, max_words: int) -> str:
    """Cut ``text`` right after its ``max_words``-th word.

    The original string is sliced, so leading whitespace and interior
    formatting up to the cut survive. Text that is blank or already within
    the limit comes back unchanged.
    """
    if max_words < 1:
        raise ValueError(f'max_words must be positive, got {max_words}')
    if count_words(text) <= max_words:
        return text
    for seen, match in enumerate(_WORD_RE.finditer(text), start=1):
        if seen == max_words:
            return text[:match.end()]
    return text


def format_time_mmss(total_seconds: float) -> str:
    safe = max(0, math.floor(total_seconds))
    minutes, seconds = divmod(safe, 60)
    return f"{minutes:02d}:{seconds:02d}"
