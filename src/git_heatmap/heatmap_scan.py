from __future__ import annotations

import logging
from pathlib import Path

from .git import DEFAULT_EXCLUDE_DIRNAMES, discover_git_roots
from .heatmap_registry import RegistryError, load_registry, merge_paths, persist_registry

logger = logging.getLogger(__name__)


def scan(folder: Path, *, store_path: Path, exclude_dirnames: set[str] | None = None) -> list[str]:
    print(f"Scanning folder: {folder}")
    excludes = set(DEFAULT_EXCLUDE_DIRNAMES) | set(exclude_dirnames or ())
    repositories = [str(p) for p in discover_git_roots(folder, excludes)]
    if not repositories:
        print("No repositories found in the folder.")
        return []
    logger.info("Found %d repositories under %s", len(repositories), folder)

    try:
        existing = load_registry(store_path)
    except RegistryError as e:
        logger.error("Error parsing registry file: %s", e)
        return []

    merged = merge_paths(repositories, existing)
    try:
        persist_registry(merged, store_path)
    except OSError as e:
        logger.error("Error writing registry file %s: %s", store_path, e)
        return []
    print(f"Repositories added to file: {store_path}")
    return merged
