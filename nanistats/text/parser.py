"""Speaker/content splitting for normalized dialogue lines."""

from __future__ import annotations

import re

from ..models import ParsedLine

_SPEAKER_PATTERN = re.compile(r"^([^:\s]+)\s*:\s*(.*)$", re.DOTALL)


def parse(line: str) -> ParsedLine:
    """Split ``Speaker: text`` into its parts; other lines are narration."""
    stripped = line.strip()
    match = _SPEAKER_PATTERN.match(stripped)
    if match:
        speaker = match.group(1).strip()
        if speaker:
            return ParsedLine(speaker=speaker, content=match.group(2).strip())
    return ParsedLine(speaker=None, content=stripped)


__all__ = ["parse"]
