from dataclasses import dataclass
from typing import Optional

from .text import clamp_to_max_words, count_words


@dataclass(frozen=True)
class EditResult:
    accepted: bool
    text: Optional[str] = None
    word_count: int = 0
    clamped: bool = False


class InputGovernor:
    """Applies the word cap to every response edit.

    ``word_target`` is validated here but only drives display; ``hard_max_words``
    is enforced by clamping the edited text, so words typed past the cap are
    dropped from storage rather than rejected.
    """

    def __init__(self, word_target: int, hard_max_words: int):
        if word_target < 1:
            raise ValueError(f'word_target must be positive, got {word_target}')
        if hard_max_words <= word_target:
            raise ValueError(
                f'hard_max_words ({hard_max_words}) must be greater than word_target ({word_target})'
            )
        self.word_target = word_target
        self.hard_max_words = hard_max_words

    def apply(self, edited_text: str, locked: bool) -> EditResult:
        if locked:
            return EditResult(accepted=False)
        words = count_words(edited_text)
        if words <= self.hard_max_words:
            return EditResult(True, edited_text, words, False)
        clamped = clamp_to_max_words(edited_text, self.hard_max_words)
        return EditResult(True, clamped, self.hard_max_words, True)
