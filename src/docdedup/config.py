"""Detector configuration and JSON config-file loading."""
from __future__ import annotations

import codecs
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any

import orjson

from docdedup.errors import ConfigError


@dataclass(frozen=True, slots=True)
class DetectorConfig:
    """Tunables for one detector run."""

    workers: int = 1
    near_duplicate_threshold: float | None = None
    shingle_size: int = 5
    include_singletons: bool = False
    glob: str = "*.md"
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not _is_int(self.workers) or self.workers < 1:
            raise ConfigError(f"workers must be an integer >= 1, got {self.workers!r}")
        if not _is_int(self.shingle_size) or self.shingle_size < 1:
            raise ConfigError(
                f"shingle_size must be an integer >= 1, got {self.shingle_size!r}"
            )
        threshold = self.near_duplicate_threshold
        if threshold is not None and (
            isinstance(threshold, bool)
            or not isinstance(threshold, (int, float))
            or not 0.0 < threshold <= 1.0
        ):
            raise ConfigError(
                f"near_duplicate_threshold must be in (0, 1], got {threshold!r}"
            )
        if not isinstance(self.include_singletons, bool):
            raise ConfigError(
                f"include_singletons must be true or false, got {self.include_singletons!r}"
            )
        _check_glob(self.glob)
        _check_encoding(self.encoding)

    def merged(self, **overrides: Any) -> DetectorConfig:
        """Return a copy with non-None overrides applied (CLI flags win)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        unknown = set(changes) - _field_names()
        if unknown:
            raise ConfigError(f"Unknown config keys: {sorted(unknown)}")
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_glob(pattern: Any) -> None:
    if not isinstance(pattern, str) or not pattern:
        raise ConfigError(f"glob must be a non-empty pattern, got {pattern!r}")
    win = PureWindowsPath(pattern)
    if PurePosixPath(pattern).is_absolute() or win.drive or win.root:
        raise ConfigError(f"glob must be a relative pattern, got {pattern!r}")


def _check_encoding(encoding: Any) -> None:
    if not isinstance(encoding, str) or not encoding:
        raise ConfigError(f"encoding must be a codec name, got {encoding!r}")
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise ConfigError(f"Unknown encoding: {encoding!r}") from exc


def _field_names() -> set[str]:
    return {f.name for f in fields(DetectorConfig)}


def config_from_dict(payload: dict[str, Any]) -> DetectorConfig:
    """Build a config from a parsed JSON object, rejecting unknown keys."""
    unknown = set(payload) - _field_names()
    if unknown:
        raise ConfigError(f"Unknown config keys: {sorted(unknown)}")
    return DetectorConfig(**payload)


def load_config(path: Path) -> DetectorConfig:
    """Load a DetectorConfig from a JSON file."""
    try:
        payload = orjson.loads(path.read_bytes())
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    except orjson.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"Config payload must be a JSON object: {path}")
    return config_from_dict(payload)
