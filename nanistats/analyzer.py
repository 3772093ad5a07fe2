"""Per-file statistics: classify, normalize, parse and tokenize each line."""

from __future__ import annotations

from pathlib import Path
from typing import List, Set

from .fs import FileSystem, LocalFileSystem
from .logging import get_logger
from .models import FileStats
from .stores import StatsCache
from .text import classify, normalize, parse, tokenize

_logger = get_logger("analyzer")


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` and drop one trailing ``\\r`` from each line."""
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def analyze_text(text: str) -> FileStats:
    """Compute statistics for the contents of one script."""
    body_chars = 0
    script_lines = 0
    speakers: Set[str] = set()
    words: List[str] = []

    for raw_line in split_lines(text.removeprefix("\ufeff")):
        kind = classify(raw_line)
        if kind.skip:
            if kind.is_script:
                script_lines += 1
            continue
        parsed = parse(normalize(raw_line))
        if parsed.speaker:
            speakers.add(parsed.speaker)
        body_chars += len(parsed.content)
        words.extend(tokenize(parsed.content))

    return FileStats(
        body_char_count=body_chars,
        word_count=len(words),
        speakers=frozenset(speakers),
        words=tuple(words),
        script_line_count=script_lines,
    )


def decode_script(data: bytes) -> str:
    return data.decode("utf-8")


class FileAnalyzer:
    """Analyzes script files read through an injected file system."""

    def __init__(self, fs: FileSystem | None = None, cache: StatsCache | None = None) -> None:
        self.fs = fs or LocalFileSystem()
        self.cache = cache

    def analyze_file(self, path: Path | str) -> FileStats:
        """Return stats for ``path``; unreadable or undecodable files count as empty."""
        path = Path(path)
        key = path.as_posix()
        signature = self._signature(path)
        if self.cache is not None and signature is not None:
            cached = self.cache.get(key, signature=signature)
            if cached is not None:
                _logger.debug("Reusing cached stats for %s", key)
                return cached

        try:
            text = decode_script(self.fs.read_bytes(path))
        except OSError as exc:
            _logger.warning("Could not read %s: %s", key, exc)
            return FileStats()
        except UnicodeDecodeError as exc:
            _logger.warning("Could not decode %s as UTF-8: %s", key, exc)
            return FileStats()

        stats = analyze_text(text)
        if self.cache is not None and signature is not None:
            self.cache.store(key, signature=signature, stats=stats)
        return stats

    def _signature(self, path: Path) -> str | None:
        if self.cache is None:
            return None
        try:
            size, mtime_ns = self.fs.signature(path)
        except OSError:
            return None
        return f"{size}:{mtime_ns}"


__all__ = ["FileAnalyzer", "analyze_text", "decode_script", "split_lines"]
