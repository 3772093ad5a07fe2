"""Dialogue statistics for Naninovel script trees."""

from .aggregator import TreeAggregator
from .analyzer import FileAnalyzer, analyze_text
from .models import AggregateStats, FileStats, LineKind, ParsedLine, StatsNode, merge_stats

__version__ = "0.1.0"

__all__ = [
    "AggregateStats",
    "FileAnalyzer",
    "FileStats",
    "LineKind",
    "ParsedLine",
    "StatsNode",
    "TreeAggregator",
    "analyze_text",
    "merge_stats",
]
