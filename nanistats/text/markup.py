"""Inline markup removal for Naninovel generic text lines."""

from __future__ import annotations

import re

from ..constants import FORMAT_TAGS

_TAG_VALUE = r"""=\s*+(?:"[^"]*"|'[^']*'|(?:[^<>\s][^<>]*+)?)"""

# Ruby keeps the base text and discards the reading.
_RUBY_PATTERN = re.compile(
    rf"<ruby\s*+{_TAG_VALUE}\s*>((?:(?!<ruby\b|</ruby\s*>).)*?)</ruby\s*>",
    re.IGNORECASE | re.DOTALL,
)

_LINE_BREAK_PATTERN = re.compile(r"<br\s*/?\s*>", re.IGNORECASE)

# ``[i]``, ``[wait 1]`` and friends; ``\[`` is an escaped literal bracket.
_INLINE_COMMAND_PATTERN = re.compile(r"(?<!\\)\[[^\[\]]*(?<!\\)\]")

_TAG_NAMES = "|".join(re.escape(name) for name in sorted(FORMAT_TAGS, key=len, reverse=True))
_FORMAT_PAIR_PATTERN = re.compile(
    rf"<({_TAG_NAMES})(?:\s*+{_TAG_VALUE})?\s*>"
    rf"((?:(?!</?(?:{_TAG_NAMES})(?![\w-])).)*?)"
    rf"</\1\s*>",
    re.IGNORECASE | re.DOTALL,
)


def strip_ruby(text: str) -> str:
    return _RUBY_PATTERN.sub(r"\1", text)


def strip_line_breaks(text: str) -> str:
    return _LINE_BREAK_PATTERN.sub("", text)


def strip_inline_commands(text: str) -> str:
    return _INLINE_COMMAND_PATTERN.sub("", text)


def strip_format_tags(text: str) -> str:
    return _FORMAT_PAIR_PATTERN.sub(r"\2", text)


def _single_pass(text: str) -> str:
    text = strip_ruby(text)
    text = strip_line_breaks(text)
    text = strip_inline_commands(text)
    return strip_format_tags(text)


def normalize(line: str) -> str:
    """Return ``line`` with ruby, line-break, inline command and format markup removed.

    Each pass removes only the innermost matched constructs, so passes repeat
    until the text stops changing. Unmatched tags are left as literal text.
    """
    text = line
    while True:
        updated = _single_pass(text)
        if updated == text:
            return text
        text = updated


__all__ = [
    "normalize",
    "strip_format_tags",
    "strip_inline_commands",
    "strip_line_breaks",
    "strip_ruby",
]
