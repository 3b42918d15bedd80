from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tccst.core.errors import InvalidStateError
from tccst.core.session import TypingSession


@dataclass(frozen=True)
class SessionResult:
    """Score of a finished session."""

    word_count: int
    mistake_count: int
    elapsed_seconds: float
    wpm: float
    keystroke_count: int = 0
    char_count: int = 0

    @property
    def accuracy(self) -> float:
        """1 - mistakes / keystrokes, clamped to [0, 1]."""
        if self.keystroke_count <= 0:
            return 1.0
        return max(0.0, 1.0 - self.mistake_count / self.keystroke_count)

    @property
    def cpm(self) -> float:
        """Target characters per minute."""
        return per_minute(self.char_count, self.elapsed_seconds)


def per_minute(count: int, elapsed_seconds: float) -> float:
    """Rate per minute; an instantaneous session has no measurable rate (0)."""
    if elapsed_seconds <= 0:
        return 0.0
    return count / elapsed_seconds * 60.0


def score(session: TypingSession) -> SessionResult:
    if not session.is_finished:
        raise InvalidStateError(f"cannot score a session that is {session.status.value}")
    if session.start_time is None or session.end_time is None:
        raise InvalidStateError("cannot score a session that was never timed")

    elapsed = max(0.0, session.end_time - session.start_time)
    word_count = len(session.target.split())
    return SessionResult(
        word_count=word_count,
        mistake_count=session.mistake_count,
        elapsed_seconds=elapsed,
        wpm=per_minute(word_count, elapsed),
        keystroke_count=session.keystroke_count,
        char_count=len(session.target),
    )


def meets_accuracy(result: SessionResult, threshold: Optional[float]) -> bool:
    """Whether ``result`` is accurate enough to be shown (``threshold`` is a 0-1 ratio)."""
    if threshold is None:
        return True
    return result.accuracy >= threshold
