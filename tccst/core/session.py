from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Set, Tuple

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class SessionStatus(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


class KeyKind(enum.Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    DELETE_WORD = "delete_word"
    OTHER = "other"


@dataclass(frozen=True)
class KeyEvent:
    """A single key press as seen by the session."""

    kind: KeyKind
    char: str = ""

    @classmethod
    def character(cls, char: str) -> "KeyEvent":
        if len(char) != 1 or not char.isprintable():
            return cls(KeyKind.OTHER)
        return cls(KeyKind.CHAR, char)

    @classmethod
    def backspace(cls) -> "KeyEvent":
        return cls(KeyKind.BACKSPACE)

    @classmethod
    def delete_word(cls) -> "KeyEvent":
        return cls(KeyKind.DELETE_WORD)

    @classmethod
    def other(cls) -> "KeyEvent":
        return cls(KeyKind.OTHER)


class TypingSession:
    """Match state machine for one attempt at retyping a target text.

    The session starts ``IDLE``. The first character key starts the timer and
    moves it to ``RUNNING``; the keystroke that makes the input equal to the
    target moves it to ``FINISHED``, after which every key is ignored.

    Input policy:
      * **non-strict** (default) – every character is accepted; a keystroke
        whose character differs from the expected one counts one mistake.
      * **strict** – a character that does not match the expected one counts
        one mistake and is not appended.

    With ``skip_word_on_space`` a space pressed in the middle of a correctly
    typed word jumps to the start of the next word; each skipped letter
    counts as a mistake. Mistakes in earlier words do not prevent a skip.

    An empty target is already ``FINISHED`` and has no timing.
    """

    def __init__(
        self,
        target: str,
        strict: bool = False,
        skip_word_on_space: bool = False,
        clock: Clock = time.monotonic,
    ) -> None:
        self._target = target
        self._strict = strict
        self._skip_word_on_space = skip_word_on_space
        self._clock = clock
        self._typed = ""
        self._skipped: Set[int] = set()
        self._start_time: Optional[float] = None
        self._end_time: Optional[float] = None
        self._mistake_count = 0
        self._keystroke_count = 0
        self._status = SessionStatus.FINISHED if not target else SessionStatus.IDLE

    @classmethod
    def from_words(cls, words: Sequence[str], **kwargs) -> "TypingSession":
        """Build a session whose target is ``words`` joined by single spaces."""
        return cls(" ".join(words), **kwargs)

    def restart(self) -> "TypingSession":
        """Return a fresh session over the same target with the same options."""
        return TypingSession(
            self._target,
            strict=self._strict,
            skip_word_on_space=self._skip_word_on_space,
            clock=self._clock,
        )

    @property
    def target(self) -> str:
        return self._target

    @property
    def typed(self) -> str:
        return self._typed

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_finished(self) -> bool:
        return self._status is SessionStatus.FINISHED

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def skip_word_on_space(self) -> bool:
        return self._skip_word_on_space

    @property
    def start_time(self) -> Optional[float]:
        """Clock reading of the first character key, ``None`` while idle."""
        return self._start_time

    @property
    def end_time(self) -> Optional[float]:
        """Clock reading of the keystroke that completed the target."""
        return self._end_time

    @property
    def elapsed(self) -> float:
        """Seconds since the timer started (frozen once finished)."""
        if self._start_time is None:
            return 0.0
        end = self._end_time if self._end_time is not None else self._clock()
        return max(0.0, end - self._start_time)

    @property
    def mistake_count(self) -> int:
        return self._mistake_count

    @property
    def keystroke_count(self) -> int:
        """Character keys handled while the session was accepting input."""
        return self._keystroke_count

    @property
    def word_count(self) -> int:
        return len(self._target.split())

    @property
    def cursor(self) -> int:
        """Index in the target of the next character to type."""
        return len(self._typed)

    def marks(self) -> List[Tuple[str, bool]]:
        """Typed characters paired with whether each matches the target.

        Letters jumped over by a skip are reported as an incorrect space.
        """
        return [
            (" ", False) if i in self._skipped else (c, c == t)
            for i, (c, t) in enumerate(zip(self._typed, self._target))
        ]

    def handle_key(self, event: KeyEvent) -> None:
        if event.kind is KeyKind.CHAR:
            self.push(event.char)
        elif event.kind is KeyKind.BACKSPACE:
            self.pop()
        elif event.kind is KeyKind.DELETE_WORD:
            self.pop_word()

    def push(self, char: str) -> None:
        """Handle one character key."""
        if self._status is SessionStatus.FINISHED:
            return
        if self._status is SessionStatus.IDLE:
            self._status = SessionStatus.RUNNING
            self._start_time = self._clock()
            logger.debug("Session started")

        if self._skip_word_on_space and char == " ":
            handled = self._skip_word()
            if handled is not None:
                if handled:
                    self._keystroke_count += 1
                    self._check_finished()
                return

        self._keystroke_count += 1
        index = len(self._typed)
        expected = self._target[index] if index < len(self._target) else None

        if self._strict:
            if char != expected:
                self._mistake_count += 1
                return
            self._typed += char
        else:
            if expected is None:
                # input is already as long as the target
                self._mistake_count += 1
                return
            self._typed += char
            if char != expected:
                self._mistake_count += 1

        self._check_finished()

    def pop(self) -> None:
        """Backspace: drop the last typed character."""
        if self._status is not SessionStatus.RUNNING or not self._typed:
            return
        self._typed = self._typed[:-1]
        self._forget_skipped()

    def pop_word(self) -> None:
        """Drop trailing spaces and then the word before them."""
        if self._status is not SessionStatus.RUNNING or not self._typed:
            return
        stripped = self._typed.rstrip(" ")
        self._typed = stripped[: stripped.rfind(" ") + 1]
        self._forget_skipped()

    def _forget_skipped(self) -> None:
        self._skipped = {i for i in self._skipped if i < len(self._typed)}

    def _skip_word(self) -> Optional[bool]:
        """Try to skip the rest of the current word.

        Returns ``None`` when the space must be handled as a normal character,
        ``False`` when it is swallowed without effect and ``True`` when the
        cursor was moved to the next word.
        """
        index = len(self._typed)
        if index == 0 or index >= len(self._target) or self._target[index] == " ":
            return None
        if self._target[index - 1] == " ":
            return False
        word_start = self._target.rfind(" ", 0, index) + 1
        if self._typed[word_start:] != self._target[word_start:index]:
            return None

        word_end = self._target.find(" ", index)
        if word_end == -1:
            word_end = len(self._target)
        skipped = word_end - index
        self._typed += self._target[index : word_end + 1]
        self._skipped.update(range(index, word_end))
        self._mistake_count += skipped
        logger.debug("Skipped %d characters", skipped)
        return True

    def _check_finished(self) -> None:
        if self._typed == self._target:
            self._status = SessionStatus.FINISHED
            self._end_time = self._clock()
            logger.info(
                "Session finished in %.2fs with %d mistakes",
                self.elapsed,
                self._mistake_count,
            )
