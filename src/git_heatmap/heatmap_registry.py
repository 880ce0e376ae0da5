from __future__ import annotations

from pathlib import Path

STORE_FILENAME = ".git_heatmap_repos"


class RegistryError(OSError):
    pass


def default_store_path() -> Path:
    try:
        return Path.home() / STORE_FILENAME
    except RuntimeError:
        return Path(STORE_FILENAME)


def load_registry(store_path: Path) -> list[str]:
    """
    Read the known repository paths, one per line, in file order.

    A missing store is an empty registry; it is created on the first write.
    """
    if not store_path.exists():
        return []
    try:
        text = store_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RegistryError(f"cannot read registry {store_path}: {e}") from e
    return [line.rstrip() for line in text.splitlines() if line.strip()]


def merge_paths(new_paths: list[str], existing_paths: list[str]) -> list[str]:
    merged = list(existing_paths)
    seen = set(merged)
    for p in new_paths:
        if p in seen:
            continue
        merged.append(p)
        seen.add(p)
    return merged


def persist_registry(paths: list[str], store_path: Path) -> None:
    # Last write wins; concurrent scans against one store are not supported.
    store_path.parent.mkdir(parents=True, exist_ok=True)
    store_path.write_text("\n".join(paths), encoding="utf-8")
