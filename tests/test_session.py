"""Tests for tccst.core.session – keystroke match state machine."""

from __future__ import annotations

import pytest

from tccst.core.session import KeyEvent, KeyKind, SessionStatus, TypingSession


def type_text(session: TypingSession, text: str) -> None:
    for ch in text:
        session.push(ch)


# ---------------------------------------------------------------------------
# KeyEvent
# ---------------------------------------------------------------------------

class TestKeyEvent:
    def test_character(self):
        ev = KeyEvent.character("a")
        assert ev.kind is KeyKind.CHAR
        assert ev.char == "a"

    def test_space_is_a_character(self):
        assert KeyEvent.character(" ").kind is KeyKind.CHAR

    def test_non_printable_becomes_other(self):
        assert KeyEvent.character("\x1b").kind is KeyKind.OTHER

    def test_multi_char_becomes_other(self):
        assert KeyEvent.character("ab").kind is KeyKind.OTHER

    def test_empty_becomes_other(self):
        assert KeyEvent.character("").kind is KeyKind.OTHER

    def test_frozen(self):
        ev = KeyEvent.backspace()
        with pytest.raises(AttributeError):
            ev.kind = KeyKind.CHAR  # type: ignore[misc]


# ---------------------------------------------------------------------------
# TypingSession – construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_starts_idle(self, clock):
        s = TypingSession("fn main", clock=clock)
        assert s.status is SessionStatus.IDLE
        assert s.typed == ""
        assert s.start_time is None
        assert s.end_time is None
        assert s.mistake_count == 0
        assert s.elapsed == 0.0

    def test_from_words_joins_with_single_spaces(self, clock):
        s = TypingSession.from_words(["fn", "let", "mut"], clock=clock)
        assert s.target == "fn let mut"
        assert s.word_count == 3

    def test_empty_target_is_finished(self, clock):
        s = TypingSession("", clock=clock)
        assert s.status is SessionStatus.FINISHED
        assert s.start_time is None
        assert s.word_count == 0

    def test_options_exposed(self, clock):
        s = TypingSession("x", strict=True, skip_word_on_space=True, clock=clock)
        assert s.strict is True
        assert s.skip_word_on_space is True


# ---------------------------------------------------------------------------
# TypingSession – transitions
# ---------------------------------------------------------------------------

class TestTransitions:
    def test_first_key_starts_timer(self, clock):
        s = TypingSession("abc", clock=clock)
        s.push("a")
        assert s.status is SessionStatus.RUNNING
        assert s.start_time == 100.0

    def test_exact_match_finishes(self, clock):
        s = TypingSession("abc", clock=clock)
        s.push("a")
        clock.advance(1.5)
        s.push("b")
        s.push("c")
        assert s.status is SessionStatus.FINISHED
        assert s.end_time == 101.5
        assert s.elapsed == pytest.approx(1.5)

    def test_no_key_accepted_after_finish(self, clock):
        s = TypingSession("ab", clock=clock)
        type_text(s, "ab")
        s.push("x")
        s.pop()
        s.pop_word()
        assert s.typed == "ab"
        assert s.keystroke_count == 2
        assert s.mistake_count == 0

    def test_elapsed_is_live_while_running(self, clock):
        s = TypingSession("abc", clock=clock)
        s.push("a")
        clock.advance(3.0)
        assert s.elapsed == pytest.approx(3.0)

    def test_elapsed_frozen_after_finish(self, clock):
        s = TypingSession("a", clock=clock)
        s.push("a")
        clock.advance(10.0)
        assert s.elapsed == 0.0

    def test_other_key_is_ignored(self, clock):
        s = TypingSession("abc", clock=clock)
        s.handle_key(KeyEvent.other())
        assert s.status is SessionStatus.IDLE
        assert s.keystroke_count == 0

    def test_handle_key_dispatch(self, clock):
        s = TypingSession("foo bar", clock=clock)
        for ch in "foo ba":
            s.handle_key(KeyEvent.character(ch))
        s.handle_key(KeyEvent.backspace())
        assert s.typed == "foo b"
        s.handle_key(KeyEvent.delete_word())
        assert s.typed == "foo "

    def test_restart_returns_fresh_session(self, clock):
        s = TypingSession("ab", strict=True, clock=clock)
        type_text(s, "xab")
        fresh = s.restart()
        assert fresh is not s
        assert fresh.target == "ab"
        assert fresh.strict is True
        assert fresh.status is SessionStatus.IDLE
        assert fresh.mistake_count == 0
        # the old instance is untouched
        assert s.status is SessionStatus.FINISHED
        assert s.mistake_count == 1


# ---------------------------------------------------------------------------
# TypingSession – mistakes (non-strict)
# ---------------------------------------------------------------------------

class TestMistakes:
    def test_perfect_typing_has_no_mistakes(self, clock):
        s = TypingSession("fn let mut", clock=clock)
        type_text(s, "fn let mut")
        assert s.mistake_count == 0
        assert s.is_finished

    def test_wrong_char_is_kept_and_counted(self, clock):
        s = TypingSession("cat dog", clock=clock)
        type_text(s, "cb")
        assert s.typed == "cb"
        assert s.mistake_count == 1

    def test_uncorrected_never_finishes(self, clock):
        s = TypingSession("cat dog", clock=clock)
        type_text(s, "cbt dog")
        assert s.typed == "cbt dog"
        assert s.mistake_count == 1
        assert s.status is SessionStatus.RUNNING

    def test_corrected_input_finishes(self, clock):
        s = TypingSession("cat dog", clock=clock)
        type_text(s, "cbt dog")
        for _ in range(6):
            s.pop()
        assert s.typed == "c"
        type_text(s, "at dog")
        assert s.is_finished
        assert s.mistake_count == 1

    def test_backspace_then_correct_does_not_add(self, clock):
        s = TypingSession("one", clock=clock)
        s.push("o")
        assert s.mistake_count == 0
        s.push("o")
        assert s.mistake_count == 1
        s.pop()
        s.push("n")
        assert s.mistake_count == 1

    def test_input_never_exceeds_target(self, clock):
        s = TypingSession("ab", clock=clock)
        type_text(s, "axy")
        assert s.typed == "ax"
        assert s.mistake_count == 2

    def test_marks(self, clock):
        s = TypingSession("cat", clock=clock)
        type_text(s, "cb")
        assert s.marks() == [("c", True), ("b", False)]
        assert s.cursor == 2


# ---------------------------------------------------------------------------
# TypingSession – backspace / delete word
# ---------------------------------------------------------------------------

class TestBackspace:
    def test_backspace_on_empty_idle_is_noop(self, clock):
        s = TypingSession("abc", clock=clock)
        s.pop()
        assert s.typed == ""
        assert s.status is SessionStatus.IDLE

    def test_backspace_on_empty_running_is_noop(self, clock):
        s = TypingSession("abc", clock=clock)
        s.push("a")
        s.pop()
        s.pop()
        assert s.typed == ""
        assert s.status is SessionStatus.RUNNING
        assert s.mistake_count == 0

    def test_backspace_does_not_change_mistakes(self, clock):
        s = TypingSession("abc", clock=clock)
        type_text(s, "ax")
        s.pop()
        assert s.typed == "a"
        assert s.mistake_count == 1

    def test_pop_word_mid_word(self, clock):
        s = TypingSession("foo bar baz", clock=clock)
        type_text(s, "foo ba")
        s.pop_word()
        assert s.typed == "foo "

    def test_pop_word_after_space(self, clock):
        s = TypingSession("foo bar baz", clock=clock)
        type_text(s, "foo bar ")
        s.pop_word()
        assert s.typed == "foo "

    def test_pop_word_first_word(self, clock):
        s = TypingSession("foo bar", clock=clock)
        type_text(s, "fo")
        s.pop_word()
        assert s.typed == ""


# ---------------------------------------------------------------------------
# TypingSession – strict mode
# ---------------------------------------------------------------------------

class TestStrictMode:
    def test_wrong_key_rejected(self, clock):
        s = TypingSession("cat", strict=True, clock=clock)
        s.push("b")
        assert s.typed == ""
        assert s.mistake_count == 1
        assert s.status is SessionStatus.RUNNING
        s.push("c")
        assert s.typed == "c"
        assert s.mistake_count == 1

    def test_finishes_with_mistakes(self, clock):
        s = TypingSession("ab", strict=True, clock=clock)
        type_text(s, "axxb")
        assert s.is_finished
        assert s.mistake_count == 2
        assert s.keystroke_count == 4


# ---------------------------------------------------------------------------
# TypingSession – skip word on space
# ---------------------------------------------------------------------------

class TestSkipWordOnSpace:
    def test_skips_rest_of_word(self, clock):
        s = TypingSession("hello world", skip_word_on_space=True, clock=clock)
        type_text(s, "he ")
        assert s.typed == "hello "
        assert s.mistake_count == 3
        assert s.keystroke_count == 3

    def test_skip_then_finish(self, clock):
        s = TypingSession("hello world", skip_word_on_space=True, clock=clock)
        type_text(s, "he world")
        assert s.is_finished

    def test_skip_last_word_finishes(self, clock):
        s = TypingSession("hello world", skip_word_on_space=True, clock=clock)
        type_text(s, "hello wo ")
        assert s.typed == "hello world"
        assert s.is_finished
        assert s.mistake_count == 3

    def test_space_at_word_start_is_ignored(self, clock):
        s = TypingSession("hello world", skip_word_on_space=True, clock=clock)
        type_text(s, "hello ")
        s.push(" ")
        assert s.typed == "hello "
        assert s.mistake_count == 0
        assert s.keystroke_count == 6

    def test_first_character_space_is_ordinary(self, clock):
        s = TypingSession("hello", skip_word_on_space=True, clock=clock)
        s.push(" ")
        assert s.typed == " "
        assert s.mistake_count == 1
        assert s.status is SessionStatus.RUNNING

    def test_space_after_wrong_partial_is_ordinary(self, clock):
        s = TypingSession("hello world", skip_word_on_space=True, clock=clock)
        type_text(s, "hx ")
        assert s.typed == "hx "
        assert s.mistake_count == 2

    def test_expected_space_is_typed_normally(self, clock):
        s = TypingSession("hi there", skip_word_on_space=True, clock=clock)
        type_text(s, "hi ")
        assert s.typed == "hi "
        assert s.mistake_count == 0

    def test_disabled_by_default(self, clock):
        s = TypingSession("hello world", clock=clock)
        type_text(s, "he ")
        assert s.typed == "he "
        assert s.mistake_count == 1

    def test_skip_after_mistake_in_earlier_word(self, clock):
        s = TypingSession("cat dog", skip_word_on_space=True, clock=clock)
        type_text(s, "cbt d ")
        assert s.typed == "cbt dog"
        assert s.mistake_count == 3
        assert not s.is_finished

    def test_skip_keeps_earlier_mistake_visible(self, clock):
        s = TypingSession("cat dog fox", skip_word_on_space=True, clock=clock)
        type_text(s, "cbt d ")
        assert s.typed == "cbt dog "
        assert s.marks()[1] == ("b", False)

    def test_skipped_letters_marked_wrong(self, clock):
        s = TypingSession("hello world", skip_word_on_space=True, clock=clock)
        type_text(s, "he ")
        assert s.marks() == [
            ("h", True),
            ("e", True),
            (" ", False),
            (" ", False),
            (" ", False),
            (" ", True),
        ]

    def test_backspace_forgets_skipped_letters(self, clock):
        s = TypingSession("hello world", skip_word_on_space=True, clock=clock)
        type_text(s, "he ")
        for _ in range(4):
            s.pop()
        assert s.typed == "he"
        type_text(s, "llo")
        assert s.marks()[2:] == [("l", True), ("l", True), ("o", True)]

    def test_delete_word_forgets_skipped_letters(self, clock):
        s = TypingSession("hello world", skip_word_on_space=True, clock=clock)
        type_text(s, "he ")
        s.pop_word()
        assert s.typed == ""
        type_text(s, "hello")
        assert all(correct for _, correct in s.marks())
