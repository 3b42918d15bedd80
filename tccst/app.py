"""Application entry point for the tccst typing game."""

from __future__ import annotations

import argparse
import curses
import logging
import random
import shutil
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from tccst.core.config import Settings, default_settings_path, load_settings_file
from tccst.core.errors import TccstError
from tccst.core.scoring import SessionResult, score
from tccst.core.session import TypingSession
from tccst.core.words import sample_words
from tccst.ui.terminal import TerminalPresenter, translate_key

VERSION = "0.3.0"

logger = logging.getLogger(__name__)


def configure_logging(verbosity: int = 0, log_file: Optional[Path] = None) -> None:
    """Configure application-wide logging with a standard format.

    The curses screen owns the terminal, so only warnings are shown unless
    ``-v`` is given or records go to ``log_file``.
    """
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=str(log_file) if log_file else None,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tccst",
        description="Practice typing with words taken from your own code.",
        epilog="Example: tccst -p ~/src/myproject -t py -w 20",
    )
    parser.add_argument("-p", "--path", dest="project_path", help="project to take words from")
    parser.add_argument("-t", "--type", dest="file_extension", help="file extension to use (default: rs)")
    parser.add_argument("-w", "--words", dest="word_count", type=int, help="number of words (default: 10)")
    parser.add_argument("-l", "--length", dest="word_length", type=int, help="only use words of this many characters")
    parser.add_argument(
        "-a",
        "--min-accuracy",
        dest="min_accuracy",
        type=float,
        help="hide the score when accuracy (percent) is below this",
    )
    parser.add_argument(
        "-s",
        "--strict",
        action="store_true",
        default=None,
        help="reject wrong characters instead of accepting them",
    )
    parser.add_argument(
        "--skip-word-on-space",
        action="store_true",
        default=None,
        help="space in the middle of a word jumps to the next word",
    )
    parser.add_argument("--comment", dest="comment_marker", help="ignore text after this marker on each line, e.g. //")
    parser.add_argument("-c", "--config", type=Path, help="YAML settings file (default: ~/.config/tccst/config.yaml)")
    parser.add_argument("--seed", type=int, help="seed for word selection")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="log more (repeat for debug)")
    parser.add_argument("--log-file", type=Path, help="write log records to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


_SETTING_ARGS = (
    "project_path",
    "file_extension",
    "word_count",
    "word_length",
    "min_accuracy",
    "strict",
    "skip_word_on_space",
    "comment_marker",
)


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Layer defaults, the settings file and the command line, then validate."""
    config_path = args.config or default_settings_path()
    file_values = load_settings_file(config_path, required=args.config is not None)
    settings = Settings.from_mapping(file_values, source=config_path.name)
    overrides = {name: getattr(args, name) for name in _SETTING_ARGS}
    return settings.merged(overrides, source="command line").validate()


def draw_words(settings: Settings, max_chars: int, rng: random.Random) -> List[str]:
    return sample_words(
        settings.project_path,
        settings.file_extension,
        settings.word_count,
        word_length=settings.word_length,
        rng=rng,
        max_chars=max_chars,
        comment_marker=settings.comment_marker,
    )


def new_session(words: Sequence[str], settings: Settings) -> TypingSession:
    return TypingSession.from_words(
        words,
        strict=settings.strict,
        skip_word_on_space=settings.skip_word_on_space,
    )


def play(stdscr, settings: Settings, words: List[str], rng: random.Random) -> None:
    """Run sessions until the user declines to try again."""
    presenter = TerminalPresenter(
        stdscr,
        cursor_foreground=settings.cursor_foreground,
        cursor_background=settings.cursor_background,
        min_accuracy=settings.min_accuracy_ratio,
    )
    session = new_session(words, settings)
    result: Optional[SessionResult] = None

    while True:
        presenter.render(session, result)
        key = presenter.read_key()

        if result is None:
            session.handle_key(translate_key(key))
            if session.is_finished:
                result = score(session)
                logger.info("Result: %s", result)
            continue

        choice = key.lower() if isinstance(key, str) else ""
        if choice == "y":
            width, height = presenter.size()
            words = draw_words(settings, width * height, rng)
            session = new_session(words, settings)
            result = None
        elif choice == "r":
            session = session.restart()
            result = None
        elif choice == "n":
            return


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.log_file)

    try:
        settings = resolve_settings(args)
        rng = random.Random(args.seed)
        width, height = shutil.get_terminal_size()
        words = draw_words(settings, width * height, rng)
        curses.wrapper(play, settings, words, rng)
    except TccstError as e:
        logger.debug("Aborting", exc_info=True)
        parser.print_usage(sys.stderr)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
