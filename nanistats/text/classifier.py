"""Line classification for Naninovel script syntax."""

from __future__ import annotations

from ..constants import COMMAND_SIGIL, COMMENT_SIGIL, LABEL_SIGIL
from ..models import LineKind

_SIGILS: tuple[tuple[str, LineKind], ...] = (
    (COMMAND_SIGIL, LineKind.COMMAND),
    (LABEL_SIGIL, LineKind.LABEL),
    (COMMENT_SIGIL, LineKind.COMMENT),
)


def classify(line: str) -> LineKind:
    """Return the kind of ``line`` based on its trimmed leading character."""
    stripped = line.strip()
    if not stripped:
        return LineKind.BLANK
    for sigil, kind in _SIGILS:
        if stripped.startswith(sigil):
            return kind
    return LineKind.CONTENT


def is_skip(line: str) -> bool:
    return classify(line).skip


__all__ = ["classify", "is_skip"]
