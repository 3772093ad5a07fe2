"""Configuration loading for nanistats (.nanistats.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .constants import CACHE_FILENAME, CONFIG_FILENAME, SCRIPT_EXTENSION, STATE_DIRNAME


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CacheConfig:
    """Per-file stats cache settings."""

    enabled: bool = False
    path: Optional[Path] = None


@dataclass
class StatsConfig:
    """Represents the settings defined in .nanistats.yml."""

    root: Path
    exclude_dirs: List[str] = field(default_factory=list)
    extension: str = SCRIPT_EXTENSION
    max_depth: Optional[int] = None
    workers: int = 1
    cache: CacheConfig = field(default_factory=CacheConfig)

    @property
    def cache_path(self) -> Path:
        return self.cache.path or self.root / STATE_DIRNAME / CACHE_FILENAME


def load_config(config_path: Path) -> StatsConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return StatsConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    extension = _as_str(data.get("extension")) or SCRIPT_EXTENSION
    if not extension.startswith("."):
        extension = f".{extension}"

    max_depth = _as_int(data.get("max_depth"))
    if max_depth is not None and max_depth < 0:
        raise ConfigError("max_depth must not be negative")

    workers = _as_int(data.get("workers"))
    if workers is None:
        workers = 1
    elif workers < 1:
        raise ConfigError("workers must be at least 1")

    cache_data = _as_dict(data.get("cache"))
    cache = CacheConfig()
    if cache_data:
        cache.enabled = _as_bool(cache_data.get("enabled")) or False
        cache_path = _as_str(cache_data.get("path"))
        cache.path = root / cache_path if cache_path else None

    return StatsConfig(
        root=root,
        exclude_dirs=_as_str_list(data.get("exclude_dirs")),
        extension=extension,
        max_depth=max_depth,
        workers=workers,
        cache=cache,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CacheConfig", "ConfigError", "StatsConfig", "load_config"]
