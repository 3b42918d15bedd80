"""Curses color pairs used by the terminal presenter."""

import curses


class TerminalColors:
    """Color pair ids; pair 0 is the terminal default."""

    CORRECT = 1
    WRONG = 2
    WRONG_OVER_SPACE = 3
    CURSOR = 4
    MUTED = 5


_CURSES_COLORS = {
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
}


def curses_color(name: str) -> int:
    """Map a settings color name to its curses constant (white if unknown)."""
    return _CURSES_COLORS.get(name.strip().lower(), curses.COLOR_WHITE)


def init_pairs(cursor_foreground: str, cursor_background: str) -> None:
    """Register the pairs. Needs an initialized screen; no-op without color support."""
    if not curses.has_colors():
        return
    curses.start_color()
    try:
        curses.use_default_colors()
        default_bg = -1
    except curses.error:
        default_bg = curses.COLOR_BLACK
    curses.init_pair(TerminalColors.CORRECT, curses.COLOR_BLUE, default_bg)
    curses.init_pair(TerminalColors.WRONG, curses.COLOR_RED, default_bg)
    curses.init_pair(TerminalColors.WRONG_OVER_SPACE, curses.COLOR_YELLOW, default_bg)
    curses.init_pair(
        TerminalColors.CURSOR,
        curses_color(cursor_foreground),
        curses_color(cursor_background),
    )
    curses.init_pair(TerminalColors.MUTED, curses.COLOR_CYAN, default_bg)
