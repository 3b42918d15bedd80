from __future__ import annotations

import logging
import os
import random
from pathlib import Path
from typing import List, Optional, Union

from tccst.core.errors import (
    InsufficientWordsError,
    NoMatchingFileError,
    PathNotFoundError,
    UnreadableFileError,
)

logger = logging.getLogger(__name__)


def find_files(root: Path, extension: str) -> List[Path]:
    """Return every regular file under ``root`` whose suffix is ``.extension``.

    The match is case-sensitive. Directories that cannot be listed are skipped.
    """
    paths: List[Path] = []
    for dirpath, _dirnames, filenames in os.walk(root):
        for name in filenames:
            path = Path(dirpath) / name
            if path.suffix[1:] != extension or not path.is_file():
                continue
            paths.append(path)
    return sorted(paths)


def code_to_words(code: str, comment_marker: Optional[str] = None) -> List[str]:
    """Split source text into whitespace-separated tokens.

    With a ``comment_marker`` (``//``, ``#`` ...) the rest of each line after
    the marker is dropped before splitting.
    """
    if not comment_marker:
        return code.split()
    words: List[str] = []
    for line in code.splitlines():
        pos = line.find(comment_marker)
        if pos != -1:
            line = line[:pos]
        words.extend(line.split())
    return words


def filter_words(words: List[str], word_length: Optional[int]) -> List[str]:
    if word_length is None:
        return list(words)
    return [w for w in words if len(w) == word_length]


def choose_words(pool: List[str], word_count: int, rng: random.Random) -> List[str]:
    if len(pool) < word_count:
        raise InsufficientWordsError(len(pool), word_count)
    return rng.sample(pool, word_count)


def read_source(path: Path) -> str:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as e:
        raise UnreadableFileError(path, str(e)) from e


def sample_words(
    root: Union[str, Path],
    extension: str,
    word_count: int,
    word_length: Optional[int] = None,
    rng: Optional[random.Random] = None,
    max_chars: Optional[int] = None,
    comment_marker: Optional[str] = None,
) -> List[str]:
    """Pick ``word_count`` words from one random ``*.extension`` file under ``root``."""
    if not extension:
        raise ValueError("extension must not be empty")
    if word_count < 0:
        raise ValueError(f"word_count must be >= 0, got {word_count}")
    if word_length is not None and word_length <= 0:
        raise ValueError(f"word_length must be positive, got {word_length}")

    root = Path(root)
    if not root.is_dir():
        raise PathNotFoundError(root)

    files = find_files(root, extension)
    if not files:
        raise NoMatchingFileError(root, extension)

    rng = rng or random.Random()
    path = rng.choice(files)
    logger.debug("Picked %s out of %d *.%s files", path, len(files), extension)

    code = read_source(path).strip()
    if max_chars is not None and len(code) > max_chars:
        code = code[:max_chars]

    pool = filter_words(code_to_words(code, comment_marker), word_length)
    logger.debug("Word pool from %s has %d candidates", path.name, len(pool))

    words = choose_words(pool, word_count, rng)
    logger.info("Sampled %d words from %s", len(words), path)
    return words


def sample(
    root: Union[str, Path],
    extension: str,
    word_count: int,
    word_length: Optional[int] = None,
    rng: Optional[random.Random] = None,
    max_chars: Optional[int] = None,
    comment_marker: Optional[str] = None,
) -> str:
    """Same as :func:`sample_words` but returns the target text, single-space joined."""
    return " ".join(
        sample_words(
            root,
            extension,
            word_count,
            word_length=word_length,
            rng=rng,
            max_chars=max_chars,
            comment_marker=comment_marker,
        )
    )
