import pytest

from conftest import make_words
from writing_practice.services.session.governor import InputGovernor
from writing_practice.services.session.text import count_words


def test_hard_cap_must_exceed_soft_target():
    with pytest.raises(ValueError):
        InputGovernor(word_target=300, hard_max_words=300)
    with pytest.raises(ValueError):
        InputGovernor(word_target=0, hard_max_words=10)


def test_locked_edits_are_rejected():
    result = InputGovernor(3, 5).apply('anything', locked=True)
    assert result.accepted is False
    assert result.text is None


def test_text_within_cap_is_kept_verbatim():
    gov = InputGovernor(3, 5)
    result = gov.apply('  one two\n', locked=False)
    assert result.accepted
    assert result.text == '  one two\n'
    assert result.clamped is False


def test_soft_target_is_display_only():
    gov = InputGovernor(3, 5)
    result = gov.apply('a b c d', locked=False)
    assert result.accepted
    assert result.text == 'a b c d'
    assert result.word_count == 4
    assert result.clamped is False


def test_words_past_hard_cap_are_dropped():
    gov = InputGovernor(3, 5)
    result = gov.apply('a b c d e f g', locked=False)
    assert result.text == 'a b c d e'
    assert result.clamped is True
    assert result.word_count == 5


def test_typing_past_cap_never_grows_stored_text():
    gov = InputGovernor(300, 350)
    stored = make_words(349) + ' lastword'
    for word in ('and', 'then', 'some', 'more', 'text'):
        result = gov.apply(stored + ' ' + word, locked=False)
        stored = result.text
        assert result.clamped
        assert count_words(stored) <= 350
    assert count_words(stored) == 350
    assert stored.endswith('lastword')


def test_continuing_the_final_word_is_not_clamped():
    gov = InputGovernor(3, 5)
    result = gov.apply('a b c d extendi', locked=False)
    assert result.text == 'a b c d extendi'
    result = gov.apply('a b c d extending', locked=False)
    assert result.text == 'a b c d extending'
