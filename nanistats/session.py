"""Workspace session: re-runs aggregation whenever a trigger event arrives."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

from .aggregator import TreeAggregator
from .analyzer import FileAnalyzer, analyze_text
from .config import ConfigError, StatsConfig, load_config
from .fs import FileSystem, LocalFileSystem
from .logging import get_logger
from .models import AggregateStats, FileStats, StatsNode
from .stores import StatsCache


class TriggerEvent(str, Enum):
    """Host notifications that request a fresh analysis."""

    ACTIVE_DOCUMENT_CHANGED = "active_document_changed"
    DOCUMENT_SAVED = "document_saved"
    CONFIGURATION_CHANGED = "configuration_changed"


class WorkspaceUnavailable(FileNotFoundError):
    """Raised when the workspace root does not exist."""


@dataclass(frozen=True)
class Snapshot:
    """Published result of one refresh."""

    generation: int
    root: str
    tree: StatsNode

    @property
    def stats(self) -> AggregateStats:
        stats = self.tree.stats
        return stats if isinstance(stats, AggregateStats) else AggregateStats.of(stats)


class StatsSession:
    """Holds the latest analysis of a workspace and refreshes it on demand.

    Each refresh is an independent aggregation. Refreshes are numbered; when a
    newer refresh has started before an older one finishes, the older result is
    dropped instead of replacing the newer one.
    """

    def __init__(
        self,
        root: Path | str,
        *,
        fs: FileSystem | None = None,
        exclude_dirs: Iterable[str] = (),
        use_cache: Optional[bool] = None,
        config_loader: Callable[[Path], StatsConfig] = load_config,
    ) -> None:
        self.root = Path(root).expanduser()
        self.fs = fs or LocalFileSystem()
        self._extra_excludes = list(exclude_dirs)
        self._use_cache = use_cache
        self._config_loader = config_loader
        self._lock = threading.Lock()
        self._generation = 0
        self._snapshot: Optional[Snapshot] = None
        self._cache: Optional[StatsCache] = None
        self.logger = get_logger("session")
        self.config = self._load_config()

    @property
    def available(self) -> bool:
        return self.fs.is_dir(self.root)

    @property
    def snapshot(self) -> Optional[Snapshot]:
        with self._lock:
            return self._snapshot

    @property
    def exclude_dirs(self) -> List[str]:
        names = list(self.config.exclude_dirs)
        names.extend(name for name in self._extra_excludes if name not in names)
        return names

    def reload_config(self) -> StatsConfig:
        config = self._load_config()
        with self._lock:
            self.config = config
            self._cache = None
        return config

    def handle(self, event: TriggerEvent, path: Path | str | None = None) -> Optional[Snapshot]:
        """React to a host trigger by starting a fresh refresh.

        A save names the written ``path``; its cached stats are dropped even when
        the file signature did not change.
        """
        self.logger.debug("Received %s", event.value)
        if event is TriggerEvent.CONFIGURATION_CHANGED:
            self.reload_config()
        elif event is TriggerEvent.DOCUMENT_SAVED and path is not None:
            cache = self._resolve_cache(self.config)
            if cache is not None:
                cache.invalidate(Path(path).as_posix())
        return self.refresh()

    def refresh(self) -> Optional[Snapshot]:
        """Aggregate the workspace and publish the result unless superseded."""
        if not self.available:
            raise WorkspaceUnavailable(f"Workspace path not found: {self.root}")

        with self._lock:
            self._generation += 1
            generation = self._generation
            config = self.config

        aggregator = self._build_aggregator(config)
        tree = aggregator.build_tree(self.root, self.exclude_dirs)

        snapshot = Snapshot(generation=generation, root=self.root.as_posix(), tree=tree)
        with self._lock:
            if generation != self._generation:
                self.logger.debug(
                    "Discarding refresh %d superseded by %d", generation, self._generation
                )
                return None
            self._snapshot = snapshot
        self._persist_cache(tree)

        stats = snapshot.stats
        self.logger.info(
            "Analyzed %d scripts: %d characters, %d words, %d speakers",
            stats.file_count,
            stats.body_char_count,
            stats.word_count,
            len(stats.speakers),
        )
        return snapshot

    def document_stats(self, path: Path | str | None = None, *, text: str | None = None) -> FileStats:
        """Stats for the active document, from its unsaved ``text`` when given."""
        if text is not None:
            return analyze_text(text)
        if path is None:
            raise ValueError("document_stats requires a path or text")
        return FileAnalyzer(self.fs, self._resolve_cache(self.config)).analyze_file(path)

    # ------------------------------------------------------------------
    # Internal helpers

    def _load_config(self) -> StatsConfig:
        try:
            return self._config_loader(self.root)
        except ConfigError as exc:
            self.logger.warning("Ignoring invalid configuration: %s", exc)
            return StatsConfig(root=self.root)

    def _build_aggregator(self, config: StatsConfig) -> TreeAggregator:
        analyzer = FileAnalyzer(self.fs, self._resolve_cache(config))
        return TreeAggregator(
            self.fs,
            analyzer,
            extension=config.extension,
            max_workers=config.workers,
            max_depth=config.max_depth,
        )

    def _resolve_cache(self, config: StatsConfig) -> Optional[StatsCache]:
        enabled = config.cache.enabled if self._use_cache is None else self._use_cache
        if not enabled:
            return None
        with self._lock:
            if self._cache is None:
                self._cache = StatsCache(config.cache_path)
            return self._cache

    def _persist_cache(self, tree: StatsNode) -> None:
        cache = self._cache
        if cache is None:
            return
        cache.prune(node.path for node in _iter_files(tree))
        try:
            cache.persist()
        except OSError as exc:
            self.logger.warning("Could not write stats cache: %s", exc)


def _iter_files(node: StatsNode) -> Iterator[StatsNode]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_directory:
            stack.extend(current.children)
        else:
            yield current


__all__ = ["Snapshot", "StatsSession", "TriggerEvent", "WorkspaceUnavailable"]
