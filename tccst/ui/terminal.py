"""Curses presenter: draws the live session and the result screen."""

from __future__ import annotations

import curses
import logging
from typing import List, Optional, Tuple, Union

from tccst.core.scoring import SessionResult, meets_accuracy
from tccst.core.session import KeyEvent, SessionStatus, TypingSession
from tccst.ui.colors import TerminalColors, init_pairs

logger = logging.getLogger(__name__)

Key = Union[str, int]

BACKSPACE_KEYS = (curses.KEY_BACKSPACE, "\x7f", "\x08")
CTRL_W = "\x17"
TRY_AGAIN = "Try again? Y(es) | N(o) | R(etry same words)"
HINT = "Backspace: delete char | Ctrl-W: delete word | Ctrl-C: quit"


def translate_key(key: Key) -> KeyEvent:
    """Turn a ``get_wch()`` result into a session key event."""
    if key in BACKSPACE_KEYS:
        return KeyEvent.backspace()
    if key == CTRL_W:
        return KeyEvent.delete_word()
    if isinstance(key, str):
        return KeyEvent.character(key)
    return KeyEvent.other()


def char_positions(char_count: int, width: int, height: int) -> List[Tuple[int, int]]:
    """Screen (x, y) of every target character.

    Text shorter than the screen width is centred on one line; longer text
    starts at column 1 and wraps at the right edge.
    """
    if width <= 1:
        return [(0, 0)] * char_count
    lines = char_count // width
    x = 1 if lines > 0 else (width - char_count) // 2
    y = max(0, height // 2 - lines // 2)

    positions: List[Tuple[int, int]] = []
    for _ in range(char_count):
        positions.append((x, y))
        x += 1
        if x >= width:
            x = 1
            y += 1
    return positions


def cell(expected: str, mark: Optional[Tuple[str, bool]], is_cursor: bool) -> Tuple[str, int]:
    """Character and color pair to draw at one target position."""
    if mark is None:
        return expected, TerminalColors.CURSOR if is_cursor else 0
    typed, correct = mark
    if correct:
        return expected, TerminalColors.CORRECT
    if typed == " ":
        return expected, TerminalColors.MUTED
    if expected == " ":
        return typed, TerminalColors.WRONG_OVER_SPACE
    return expected, TerminalColors.WRONG


def summary_text(result: SessionResult) -> str:
    return (
        f"time: {int(result.elapsed_seconds)} seconds"
        f" | wpm: {int(result.wpm)} (cpm: {int(result.cpm)})"
        f" | mistakes: {result.mistake_count}"
        f" | accuracy: {result.accuracy * 100:.2f}%"
        f" | word count: {result.word_count}"
    )


def fit_lines(text: str, width: int) -> List[str]:
    """Split ``text`` on ``|`` when it does not fit in ``width`` columns."""
    if len(text) <= width:
        return [text]
    return [part.strip() for part in text.split("|")]


def result_lines(result: SessionResult, min_accuracy: Optional[float], width: int) -> List[str]:
    """Lines of the result screen; the score is hidden below ``min_accuracy`` (0-1)."""
    if meets_accuracy(result, min_accuracy):
        text = summary_text(result)
    else:
        text = f"Accuracy too low ({result.accuracy * 100:.2f}%)"
    lines = fit_lines(text, width)
    lines.append(" ")
    lines.extend(fit_lines(TRY_AGAIN, width))
    return lines


class TerminalPresenter:
    """Draws sessions and results on a curses screen. Never mutates the session."""

    def __init__(
        self,
        stdscr,
        cursor_foreground: str = "black",
        cursor_background: str = "white",
        min_accuracy: Optional[float] = None,
    ) -> None:
        self._stdscr = stdscr
        self._min_accuracy = min_accuracy
        try:
            curses.curs_set(0)
        except curses.error:
            logger.debug("Terminal does not support hiding the cursor")
        init_pairs(cursor_foreground, cursor_background)
        self._colors = curses.has_colors()

    def size(self) -> Tuple[int, int]:
        """(width, height) of the screen."""
        height, width = self._stdscr.getmaxyx()
        return width, height

    def read_key(self) -> Key:
        return self._stdscr.get_wch()

    def render(self, session: TypingSession, result: Optional[SessionResult] = None) -> None:
        self._stdscr.erase()
        if result is not None:
            self._draw_result(result)
        else:
            self._draw_session(session)
        self._stdscr.refresh()

    def _draw_session(self, session: TypingSession) -> None:
        width, height = self.size()
        target = session.target
        marks = session.marks()
        cursor = session.cursor

        for i, (x, y) in enumerate(char_positions(len(target), width, height)):
            mark = marks[i] if i < len(marks) else None
            char, pair = cell(target[i], mark, i == cursor)
            self._put(y, x, char, pair)

        if session.status is SessionStatus.IDLE:
            self._put_centered(height - 2, "Start typing to begin", TerminalColors.MUTED)
        self._put_centered(height - 1, HINT, TerminalColors.MUTED)

    def _draw_result(self, result: SessionResult) -> None:
        width, height = self.size()
        lines = result_lines(result, self._min_accuracy, width)
        max_width = max(len(line) for line in lines)
        x = max(0, (width - max_width) // 2)
        y = max(0, height // 2 - len(lines) // 2)
        for offset, line in enumerate(lines):
            self._put(y + offset, x, line, 0)

    def _put_centered(self, y: int, text: str, pair: int) -> None:
        width, _ = self.size()
        self._put(y, max(0, (width - len(text)) // 2), text[: max(0, width - 1)], pair)

    def _put(self, y: int, x: int, text: str, pair: int) -> None:
        attr = curses.color_pair(pair) if self._colors and pair else curses.A_NORMAL
        try:
            self._stdscr.addstr(y, x, text, attr)
        except curses.error:
            # writing the bottom-right cell or past a shrunken screen
            pass
