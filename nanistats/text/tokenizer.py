"""Unicode-aware word tokenization."""

from __future__ import annotations

from typing import List

import regex

_SEPARATOR_RUN = regex.compile(r"[\s\p{P}]+")


def is_separator(char: str) -> bool:
    """True for whitespace and any Unicode punctuation character."""
    return _SEPARATOR_RUN.fullmatch(char) is not None


def tokenize(content: str) -> List[str]:
    """Split ``content`` on runs of whitespace and punctuation.

    Hyphens are punctuation, so ``"Foo-bar"`` yields two tokens. Text without
    spaces (Japanese prose, for instance) only breaks at punctuation such as
    ``、`` and ``。``.
    """
    return [token for token in _SEPARATOR_RUN.split(content) if token]


def count_words(content: str) -> int:
    return len(tokenize(content))


__all__ = ["count_words", "is_separator", "tokenize"]
