"""File-system capabilities injected into the analyzer and aggregator."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple


@dataclass(frozen=True)
class DirEntry:
    """A direct child returned by a directory listing."""

    name: str
    path: Path
    is_dir: bool


class FileSystem(ABC):
    """Contract for the directory listing and file read primitives."""

    @abstractmethod
    def list_dir(self, path: Path) -> List[DirEntry]:
        """Return the direct children of ``path``; raise ``OSError`` on failure."""

    @abstractmethod
    def read_bytes(self, path: Path) -> bytes:
        """Return the raw contents of ``path``; raise ``OSError`` on failure."""

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        """Return True when ``path`` exists and is a directory."""

    def signature(self, path: Path) -> Tuple[int, int]:
        """Return ``(size, mtime_ns)`` used to detect changed files."""
        raise OSError(f"signature unavailable for {path}")

    def identity(self, path: Path) -> str:
        """Return a key identifying the directory ``path`` really points at."""
        return Path(path).as_posix()


class LocalFileSystem(FileSystem):
    """Reads from the local disk."""

    def __init__(self, follow_symlinks: bool = True) -> None:
        self.follow_symlinks = follow_symlinks

    def list_dir(self, path: Path) -> List[DirEntry]:
        entries: List[DirEntry] = []
        with os.scandir(path) as iterator:
            for entry in iterator:
                try:
                    is_dir = entry.is_dir(follow_symlinks=self.follow_symlinks)
                except OSError:
                    is_dir = False
                entries.append(DirEntry(name=entry.name, path=Path(entry.path), is_dir=is_dir))
        return entries

    def read_bytes(self, path: Path) -> bytes:
        return Path(path).read_bytes()

    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir()

    def signature(self, path: Path) -> Tuple[int, int]:
        stat_result = Path(path).stat()
        mtime_ns = getattr(stat_result, "st_mtime_ns", int(stat_result.st_mtime * 1_000_000_000))
        return stat_result.st_size, mtime_ns

    def identity(self, path: Path) -> str:
        return os.path.realpath(path)


__all__ = ["DirEntry", "FileSystem", "LocalFileSystem"]
