"""Core data models shared across nanistats components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple


class LineKind(str, Enum):
    """Classification of a single raw script line."""

    CONTENT = "content"
    BLANK = "blank"
    COMMAND = "command"
    LABEL = "label"
    COMMENT = "comment"

    @property
    def skip(self) -> bool:
        return self is not LineKind.CONTENT

    @property
    def is_script(self) -> bool:
        """True for command, label and comment lines."""
        return self in (LineKind.COMMAND, LineKind.LABEL, LineKind.COMMENT)


@dataclass(frozen=True)
class ParsedLine:
    """A normalized content line split into speaker and spoken text."""

    speaker: Optional[str]
    content: str


@dataclass(frozen=True)
class FileStats:
    """Statistics for a single script file."""

    body_char_count: int = 0
    word_count: int = 0
    speakers: FrozenSet[str] = frozenset()
    words: Tuple[str, ...] = ()
    script_line_count: int = 0

    @property
    def unique_words(self) -> List[str]:
        return sorted(set(self.words))

    @property
    def speaker_char_count(self) -> int:
        """Total characters across the unique speaker names."""
        return sum(len(speaker) for speaker in self.speakers)

    def to_dict(self, *, unique_words: bool = False) -> Dict[str, Any]:
        return {
            "body_char_count": self.body_char_count,
            "word_count": self.word_count,
            "speakers": sorted(self.speakers),
            "words": self.unique_words if unique_words else list(self.words),
            "script_line_count": self.script_line_count,
            "speaker_char_count": self.speaker_char_count,
        }


@dataclass(frozen=True)
class AggregateStats(FileStats):
    """Merged statistics for a directory subtree.

    Counts are sums over every contributing file, while ``speakers`` is the
    union of the per-file speaker sets: a name used in several files appears
    once here.
    """

    file_count: int = 0

    @classmethod
    def of(cls, stats: FileStats) -> "AggregateStats":
        """Lift a single file's stats into a one-file aggregate."""
        if isinstance(stats, AggregateStats):
            return stats
        return cls(
            body_char_count=stats.body_char_count,
            word_count=stats.word_count,
            speakers=stats.speakers,
            words=stats.words,
            script_line_count=stats.script_line_count,
            file_count=1,
        )

    def merge(self, other: FileStats) -> "AggregateStats":
        return merge_stats((self, other))

    def to_dict(self, *, unique_words: bool = False) -> Dict[str, Any]:
        data = super().to_dict(unique_words=unique_words)
        data["file_count"] = self.file_count
        return data


def merge_stats(items: Iterable[FileStats]) -> AggregateStats:
    """Fold any number of file or aggregate stats into one aggregate."""
    body_chars = 0
    words_total = 0
    script_lines = 0
    files = 0
    speakers: Set[str] = set()
    words: List[str] = []
    for item in items:
        lifted = AggregateStats.of(item)
        body_chars += lifted.body_char_count
        words_total += lifted.word_count
        script_lines += lifted.script_line_count
        files += lifted.file_count
        speakers.update(lifted.speakers)
        words.extend(lifted.words)
    return AggregateStats(
        body_char_count=body_chars,
        word_count=words_total,
        speakers=frozenset(speakers),
        words=tuple(words),
        script_line_count=script_lines,
        file_count=files,
    )


@dataclass(frozen=True)
class StatsNode:
    """A file or directory in the analyzed tree together with its stats."""

    name: str
    path: str
    kind: str
    stats: FileStats
    children: Tuple["StatsNode", ...] = field(default_factory=tuple)

    @property
    def is_directory(self) -> bool:
        return self.kind == "directory"

    def to_dict(self, *, unique_words: bool = False) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "kind": self.kind,
            "stats": self.stats.to_dict(unique_words=unique_words),
            "children": [child.to_dict(unique_words=unique_words) for child in self.children],
        }


__all__ = [
    "AggregateStats",
    "FileStats",
    "LineKind",
    "ParsedLine",
    "StatsNode",
    "merge_stats",
]
