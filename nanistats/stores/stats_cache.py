"""Persistent cache for per-file script statistics."""

from __future__ import annotations

from datetime import UTC, datetime
import json
import threading
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..models import FileStats

_CACHE_VERSION = 1


class StatsCache:
    """Stores file stats keyed by path and invalidated by a file signature.

    The signature is whatever the file system reports for change detection,
    ``size:mtime_ns`` for local files. A lookup whose signature differs from
    the stored one is a miss, so an edited file is always re-analyzed.
    """

    def __init__(self, path: Path | None) -> None:
        self._path = path
        self._entries: Dict[str, Dict[str, object]] = {}
        self._dirty = False
        self._lock = threading.Lock()
        if self._path is not None:
            self._load(self._path)

    def get(self, key: str, *, signature: str) -> Optional[FileStats]:
        with self._lock:
            entry = self._entries.get(key)
        if not entry:
            return None
        if entry.get("signature") != signature:
            return None
        return _stats_from_dict(entry.get("stats"))

    def store(self, key: str, *, signature: str, stats: FileStats) -> None:
        with self._lock:
            self._entries[key] = {
                "signature": signature,
                "stats": _stats_to_dict(stats),
                "updated_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            }
            self._dirty = True

    def invalidate(self, key: str) -> None:
        with self._lock:
            if self._entries.pop(key, None) is not None:
                self._dirty = True

    def prune(self, keys_to_keep: Iterable[str]) -> None:
        keep = set(keys_to_keep)
        with self._lock:
            removed = [key for key in self._entries if key not in keep]
            if removed:
                for key in removed:
                    self._entries.pop(key, None)
                self._dirty = True

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._entries)

    def persist(self) -> None:
        with self._lock:
            if not self._dirty or self._path is None:
                return
            payload = {
                "version": _CACHE_VERSION,
                "entries": self._entries,
            }
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False), encoding="utf-8"
            )
            self._dirty = False

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError):
            return
        if not isinstance(data, dict) or data.get("version") != _CACHE_VERSION:
            return
        entries = data.get("entries")
        if not isinstance(entries, dict):
            return
        valid_entries: Dict[str, Dict[str, object]] = {}
        for key, raw in entries.items():
            if not isinstance(key, str) or not isinstance(raw, dict):
                continue
            if not isinstance(raw.get("signature"), str) or "stats" not in raw:
                continue
            valid_entries[key] = raw
        self._entries = valid_entries
        self._dirty = False


def _stats_to_dict(stats: FileStats) -> Dict[str, object]:
    return {
        "body_char_count": stats.body_char_count,
        "word_count": stats.word_count,
        "speakers": sorted(stats.speakers),
        "words": list(stats.words),
        "script_line_count": stats.script_line_count,
    }


def _stats_from_dict(payload: object) -> Optional[FileStats]:
    if not isinstance(payload, dict):
        return None
    body_chars = payload.get("body_char_count")
    word_count = payload.get("word_count")
    script_lines = payload.get("script_line_count", 0)
    speakers = payload.get("speakers")
    words = payload.get("words")
    if (
        not isinstance(body_chars, int)
        or not isinstance(word_count, int)
        or not isinstance(script_lines, int)
        or not isinstance(speakers, list)
        or not isinstance(words, list)
    ):
        return None
    if not all(isinstance(item, str) for item in speakers):
        return None
    if not all(isinstance(item, str) for item in words):
        return None
    return FileStats(
        body_char_count=body_chars,
        word_count=word_count,
        speakers=frozenset(speakers),
        words=tuple(words),
        script_line_count=script_lines,
    )


__all__ = ["StatsCache"]
