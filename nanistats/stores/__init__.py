"""Persistent stores used across analysis runs."""

from .stats_cache import StatsCache

__all__ = ["StatsCache"]
