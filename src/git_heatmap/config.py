from __future__ import annotations

import json
from pathlib import Path


class ConfigError(ValueError):
    pass


def default_config_path() -> Path:
    try:
        return Path.home() / ".git_heatmap.json"
    except RuntimeError:
        return Path(".git_heatmap.json")


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        config = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot read config {config_path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigError(f"config {config_path} must hold a JSON object")
    validate_config(config)
    return config


def validate_config(config: dict) -> None:
    excludes = config.get("exclude_dirnames")
    if excludes is not None and (not isinstance(excludes, list) or not all(isinstance(d, str) for d in excludes)):
        raise ConfigError(f"exclude_dirnames must be a list of strings, got {excludes!r}")
    store = config.get("store_path")
    if store is not None and not isinstance(store, str):
        raise ConfigError(f"store_path must be a string, got {store!r}")
    color = config.get("color")
    if color is not None and not isinstance(color, bool):
        raise ConfigError(f"color must be true or false, got {color!r}")


def config_exclude_dirnames(config: dict) -> set[str]:
    return {str(d).strip() for d in (config.get("exclude_dirnames") or []) if str(d).strip()}


def config_store_path(config: dict) -> Path | None:
    raw = str(config.get("store_path", "") or "").strip()
    if not raw:
        return None
    return Path(raw).expanduser()


def config_color(config: dict) -> bool:
    return bool(config.get("color", True))
