"""Recursive aggregation of script statistics over a directory tree."""

from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, cast

from .analyzer import FileAnalyzer
from .constants import SCRIPT_EXTENSION
from .fs import DirEntry, FileSystem, LocalFileSystem
from .logging import get_logger
from .models import AggregateStats, FileStats, StatsNode, merge_stats


class TreeAggregator:
    """Walks a directory tree and merges per-file stats into subtree totals.

    The walk is an explicit worklist rather than Python recursion. Every
    directory is entered at most once per run, keyed by the identity the file
    system reports for it, which keeps symlink loops finite.
    """

    def __init__(
        self,
        fs: FileSystem | None = None,
        analyzer: FileAnalyzer | None = None,
        *,
        extension: str = SCRIPT_EXTENSION,
        max_workers: int = 1,
        max_depth: Optional[int] = None,
    ) -> None:
        self.fs = fs or LocalFileSystem()
        self.analyzer = analyzer or FileAnalyzer(self.fs)
        self.extension = extension
        self.max_workers = max(1, max_workers)
        self.max_depth = max_depth
        self.logger = get_logger("aggregator")

    def aggregate(self, directory: Path | str, exclude_names: Iterable[str] = ()) -> AggregateStats:
        """Return the merged stats for every script under ``directory``."""
        return cast(AggregateStats, self.build_tree(directory, exclude_names).stats)

    def build_tree(self, directory: Path | str, exclude_names: Iterable[str] = ()) -> StatsNode:
        """Return the analyzed tree rooted at ``directory``.

        Children keep directory-listing order; sorting for display is left to
        the caller.
        """
        root = Path(directory)
        if isinstance(exclude_names, str):
            exclude_names = (exclude_names,)
        excluded = frozenset(exclude_names)
        listings, order = self._walk(root, excluded)
        self.logger.debug("Walked %d directories under %s", len(order), root)

        nodes: Dict[Path, StatsNode] = {}
        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                self._fold(order, listings, nodes, executor)
        else:
            self._fold(order, listings, nodes, None)
        return nodes[root]

    # ------------------------------------------------------------------
    # Internal helpers

    def _walk(
        self, root: Path, excluded: frozenset[str]
    ) -> Tuple[Dict[Path, List[DirEntry]], List[Path]]:
        listings: Dict[Path, List[DirEntry]] = {}
        order: List[Path] = []
        visited: Set[str] = {self.fs.identity(root)}
        stack: List[Tuple[Path, int]] = [(root, 0)]

        while stack:
            current, depth = stack.pop()
            order.append(current)
            kept: List[DirEntry] = []
            subdirs: List[Tuple[Path, int]] = []
            for entry in self._list(current):
                if entry.is_dir:
                    if entry.name in excluded:
                        self.logger.debug("Skipping excluded directory %s", entry.path)
                        continue
                    if self.max_depth is not None and depth >= self.max_depth:
                        self.logger.debug("Max depth reached at %s", entry.path)
                        continue
                    identity = self.fs.identity(entry.path)
                    if identity in visited:
                        self.logger.debug("Skipping already visited directory %s", entry.path)
                        continue
                    visited.add(identity)
                    kept.append(entry)
                    subdirs.append((entry.path, depth + 1))
                elif entry.name.endswith(self.extension):
                    kept.append(entry)
            listings[current] = kept
            stack.extend(reversed(subdirs))

        return listings, order

    def _fold(
        self,
        order: Sequence[Path],
        listings: Dict[Path, List[DirEntry]],
        nodes: Dict[Path, StatsNode],
        executor: Executor | None,
    ) -> None:
        # Children are discovered after their parent, so walking the discovery
        # order backwards visits every subdirectory before the directory holding it.
        for current in reversed(order):
            entries = listings[current]
            file_paths = [entry.path for entry in entries if not entry.is_dir]
            file_stats = dict(zip(file_paths, self._analyze_files(file_paths, executor)))

            children: List[StatsNode] = []
            for entry in entries:
                if entry.is_dir:
                    children.append(nodes.pop(entry.path))
                else:
                    children.append(
                        StatsNode(
                            name=entry.name,
                            path=entry.path.as_posix(),
                            kind="file",
                            stats=file_stats[entry.path],
                        )
                    )

            nodes[current] = StatsNode(
                name=current.name or current.as_posix(),
                path=current.as_posix(),
                kind="directory",
                stats=merge_stats(child.stats for child in children),
                children=tuple(children),
            )

    def _analyze_files(self, paths: List[Path], executor: Executor | None) -> List[FileStats]:
        if executor is None or len(paths) < 2:
            return [self.analyzer.analyze_file(path) for path in paths]
        return list(executor.map(self.analyzer.analyze_file, paths))

    def _list(self, directory: Path) -> List[DirEntry]:
        try:
            return self.fs.list_dir(directory)
        except OSError as exc:
            self.logger.warning("Could not list %s: %s", directory, exc)
            return []


__all__ = ["TreeAggregator"]
