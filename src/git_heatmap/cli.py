from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import ConfigError, config_color, config_exclude_dirnames, config_store_path, default_config_path, load_config
from .heatmap_registry import default_store_path
from .heatmap_scan import scan
from .heatmap_stats import stats

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-heatmap",
        description="Show a six-month commit heat-map for one author across local git repositories.",
    )
    parser.add_argument("--folder", type=Path, default=None, help="Folder to scan for git repositories (adds them to the registry).")
    parser.add_argument("--email", type=str, default="", help="Author email whose commits are counted.")
    parser.add_argument("--store", type=Path, default=None, help="Registry file of known repositories (default: ~/.git_heatmap_repos).")
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON config file (default: ~/.git_heatmap.json).")
    parser.add_argument("--no-color", action="store_true", help="Print the grid without ANSI colors.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level for diagnostics written to stderr.",
    )
    return parser


def setup_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level), format="%(levelname)s: %(message)s", stream=sys.stderr)


def flush_logging() -> None:
    for handler in logging.getLogger().handlers:
        handler.flush()


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        config_path = args.config or default_config_path()
        try:
            config = load_config(config_path)
        except ConfigError as e:
            logger.error("%s; using defaults", e)
            config = {}

        store_path = args.store or config_store_path(config) or default_store_path()
        color = config_color(config) and not args.no_color

        if args.folder is not None:
            scan(args.folder, store_path=store_path, exclude_dirnames=config_exclude_dirnames(config))

        stats(args.email, store_path=store_path, color=color)
    finally:
        flush_logging()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
