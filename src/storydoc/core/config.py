"""Parser configuration and its optional on-disk overrides."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path

_DEFAULT_MAX_CHOICE_DEPTH = 32
_MAX_CHOICE_DEPTH_LIMIT = 200
_DEPTH_ENV_VAR = "STORYDOC_MAX_CHOICE_DEPTH"

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """Knobs consumed by the document parser."""

    max_choice_depth: int = _DEFAULT_MAX_CHOICE_DEPTH
    allow_int_for_float: bool = True

    def __post_init__(self) -> None:
        if not 1 <= self.max_choice_depth <= _MAX_CHOICE_DEPTH_LIMIT:
            raise ValueError(
                f"max_choice_depth must be between 1 and {_MAX_CHOICE_DEPTH_LIMIT}."
            )


DEFAULT_CONFIG = ParserConfig()


def get_user_config_dir() -> Path:
    """Return the per-user configuration directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "storydoc"
        return Path.home() / "storydoc"
    return Path.home() / ".config" / "storydoc"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_config_dir() / "config.json"


def _normalize_depth(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return _DEFAULT_MAX_CHOICE_DEPTH
    if value < 1:
        return 1
    return min(value, _MAX_CHOICE_DEPTH_LIMIT)


def _normalize_flag(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def load_config(path: Path | None = None) -> ParserConfig:
    """Load parser config from disk or return defaults.

    A missing or malformed file yields the defaults; unknown keys are ignored.
    The ``STORYDOC_MAX_CHOICE_DEPTH`` environment variable wins over the file.
    """
    config_path = path or get_default_config_path()
    config = DEFAULT_CONFIG
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        raw = None
    if isinstance(raw, dict):
        config = ParserConfig(
            max_choice_depth=_normalize_depth(
                raw.get("max_choice_depth", _DEFAULT_MAX_CHOICE_DEPTH)
            ),
            allow_int_for_float=_normalize_flag(raw.get("allow_int_for_float"), True),
        )
    env_depth = os.environ.get(_DEPTH_ENV_VAR)
    if env_depth is not None:
        try:
            config = replace(config, max_choice_depth=_normalize_depth(int(env_depth)))
        except ValueError:
            logger.warning("Ignoring non-integer %s=%r", _DEPTH_ENV_VAR, env_depth)
    return config


def save_config(config: ParserConfig, path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "max_choice_depth": _normalize_depth(config.max_choice_depth),
        "allow_int_for_float": bool(config.allow_int_for_float),
    }
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
