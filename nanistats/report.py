"""Text and JSON rendering of analysis results."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from jinja2 import Environment, FileSystemLoader

from .models import AggregateStats, FileStats, StatsNode

_TEMPLATES_DIR = Path(__file__).with_name("templates")


@dataclass
class ReportRow:
    """One line of the rendered tree."""

    depth: int
    label: str
    body_char_count: str
    word_count: str
    speaker_count: str


def format_count(value: int) -> str:
    """Group thousands with commas: ``1234`` becomes ``1,234``."""
    return f"{value:,}"


def sorted_children(node: StatsNode) -> List[StatsNode]:
    """Directories first, then files, each alphabetically."""
    return sorted(node.children, key=lambda child: (not child.is_directory, child.name.casefold()))


def build_rows(node: StatsNode, *, include_root: bool = False) -> List[ReportRow]:
    rows: List[ReportRow] = []
    start_depth = 0 if include_root else -1
    stack = [(node, start_depth)]
    while stack:
        current, depth = stack.pop()
        if depth >= 0:
            label = f"{current.name}/" if current.is_directory else current.name
            rows.append(
                ReportRow(
                    depth=depth,
                    label=label,
                    body_char_count=format_count(current.stats.body_char_count),
                    word_count=format_count(current.stats.word_count),
                    speaker_count=format_count(len(current.stats.speakers)),
                )
            )
        stack.extend((child, depth + 1) for child in reversed(sorted_children(current)))
    return rows


def summarize(stats: FileStats) -> Dict[str, str]:
    file_count = stats.file_count if isinstance(stats, AggregateStats) else 1
    return {
        "body_char_count": format_count(stats.body_char_count),
        "word_count": format_count(stats.word_count),
        "speaker_count": format_count(len(stats.speakers)),
        "speaker_char_count": format_count(stats.speaker_char_count),
        "script_line_count": format_count(stats.script_line_count),
        "file_count": format_count(file_count),
    }


class ReportRenderer:
    """Renders stats through the packaged Jinja templates."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        directories = [str(templates_dir)] if templates_dir else []
        directories.append(str(_TEMPLATES_DIR))
        self._env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render_tree(
        self,
        root: str,
        node: StatsNode,
        *,
        unique_words: bool = False,
        show_tree: bool = True,
    ) -> str:
        return self._render(
            root=root,
            stats=node.stats,
            rows=build_rows(node) if show_tree else [],
            unique_words=unique_words,
        )

    def render_file(self, path: str, stats: FileStats, *, unique_words: bool = False) -> str:
        return self._render(root=path, stats=stats, rows=[], unique_words=unique_words)

    def render_unavailable(self, root: str) -> str:
        template = self._env.get_template("report.txt.j2")
        return template.render(root=root, available=False)

    def _render(
        self,
        *,
        root: str,
        stats: FileStats,
        rows: List[ReportRow],
        unique_words: bool,
    ) -> str:
        template = self._env.get_template("report.txt.j2")
        words: Optional[List[str]] = stats.unique_words if unique_words else None
        return template.render(
            root=root,
            available=True,
            totals=summarize(stats),
            speakers=sorted(stats.speakers),
            unique_words=words,
            rows=rows,
        )


def render_json(payload: StatsNode | FileStats, *, unique_words: bool = False) -> str:
    return json.dumps(payload.to_dict(unique_words=unique_words), ensure_ascii=False, indent=2)


__all__ = [
    "ReportRenderer",
    "ReportRow",
    "build_rows",
    "format_count",
    "render_json",
    "sorted_children",
    "summarize",
]
