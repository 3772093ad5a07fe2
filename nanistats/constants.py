"""Shared constants for Naninovel script analysis."""

from __future__ import annotations

SCRIPT_EXTENSION = ".nani"

CONFIG_FILENAME = ".nanistats.yml"
STATE_DIRNAME = ".nanistats"
CACHE_FILENAME = "stats_cache.json"

# Leading characters that mark a line as script syntax rather than prose.
# The table is fixed; it is not read from configuration.
COMMAND_SIGIL = "@"
LABEL_SIGIL = "#"
COMMENT_SIGIL = ";"

# Paired rich-text tags whose inner text is kept once the tags are removed.
FORMAT_TAGS: frozenset[str] = frozenset(
    {
        "alpha",
        "b",
        "color",
        "cspace",
        "font",
        "i",
        "indent",
        "line-height",
        "link",
        "lowercase",
        "margin",
        "mark",
        "mspace",
        "nobr",
        "noparse",
        "pos",
        "rotate",
        "s",
        "size",
        "smallcaps",
        "style",
        "sub",
        "sup",
        "u",
        "uppercase",
        "voffset",
        "width",
    }
)


__all__ = [
    "CACHE_FILENAME",
    "COMMAND_SIGIL",
    "COMMENT_SIGIL",
    "CONFIG_FILENAME",
    "FORMAT_TAGS",
    "LABEL_SIGIL",
    "SCRIPT_EXTENSION",
    "STATE_DIRNAME",
]
