from __future__ import annotations

import datetime as dt
import logging
import os
import subprocess
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import Optional

from .models import CommitRecord, GitError

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_DIRNAMES = frozenset({"vendor", "node_modules"})

_LOG_FORMAT = "%H%x09%ae%x09%cI"


def run_git(args: list[str], cwd: Path, timeout_s: int = 300) -> tuple[int, str, str]:
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout_s,
    )
    return proc.returncode, proc.stdout, proc.stderr


def discover_git_roots(root: Path, exclude_dirnames: set[str] | frozenset[str] = DEFAULT_EXCLUDE_DIRNAMES) -> list[Path]:
    """
    Walk `root` depth-first and return every directory that directly holds a
    `.git` directory, in traversal order.

    Unreadable subtrees are logged and skipped; the rest of the walk goes on.
    """
    roots: list[Path] = []
    top = Path(root).expanduser().resolve()

    def onerror(err: OSError) -> None:
        logger.warning("Error reading folder %s: %s", err.filename, err.strerror or err)

    for dirpath, dirnames, _filenames in os.walk(top, onerror=onerror):
        if ".git" in dirnames:
            roots.append(Path(dirpath))
        dirnames[:] = sorted(d for d in dirnames if d not in exclude_dirnames and d != ".git")
    return roots


def get_repo_toplevel(candidate: Path) -> Optional[Path]:
    code, out, _ = run_git(["rev-parse", "--show-toplevel"], cwd=candidate)
    if code != 0:
        return None
    try:
        return Path(out.strip()).resolve()
    except OSError:
        return None


def resolve_head(repo: Path) -> str:
    try:
        top = get_repo_toplevel(repo)
        if top is None or top != Path(repo).resolve():
            raise GitError("not a git repository root")
        code, out, err = run_git(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"], cwd=repo)
    except (OSError, subprocess.TimeoutExpired) as e:
        raise GitError(f"cannot open repository: {e}") from e
    if code != 0 or not out.strip():
        raise GitError(f"cannot resolve HEAD: {err.strip()[:500] or 'no commits'}")
    return out.strip()


def _parse_log_line(line: str) -> CommitRecord | None:
    parts = line.split("\t", 2)
    if len(parts) != 3:
        return None
    sha, email, committed_iso = parts
    s = committed_iso.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        committed_at = dt.datetime.fromisoformat(s)
    except ValueError:
        return None
    if committed_at.tzinfo is None:
        committed_at = committed_at.replace(tzinfo=dt.timezone.utc)
    return CommitRecord(sha=sha.strip(), author_email=email, committed_at=committed_at)


def iter_commits(repo: Path, rev: str = "HEAD") -> Iterator[CommitRecord]:
    """
    Stream commits reachable from `rev`, newest first.

    Every call starts its own `git log`; the process is reaped even when the
    caller stops iterating early.
    """
    cmd = ["git", "log", f"--format={_LOG_FORMAT}", rev, "--"]
    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(repo),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise GitError(f"failed to start git log: {e}") from e

    stderr_chunks: list[str] = []
    stderr_chars = 0
    max_stderr_chars = 50_000

    def drain_stderr() -> None:
        nonlocal stderr_chars
        if proc.stderr is None:
            return
        while True:
            chunk = proc.stderr.read(8192)
            if not chunk:
                return
            if stderr_chars >= max_stderr_chars:
                continue
            take = chunk[: max_stderr_chars - stderr_chars]
            stderr_chunks.append(take)
            stderr_chars += len(take)

    stderr_thread = threading.Thread(target=drain_stderr, daemon=True)
    stderr_thread.start()

    finished = False
    try:
        assert proc.stdout is not None
        for raw_line in proc.stdout:
            line = raw_line.rstrip("\n")
            if not line:
                continue
            record = _parse_log_line(line)
            if record is None:
                logger.debug("Skipping unparsable log line in %s: %r", repo, line)
                continue
            yield record
        finished = True
    finally:
        if not finished and proc.poll() is None:
            proc.kill()
        if proc.stdout is not None:
            proc.stdout.close()
        code = proc.wait()
        stderr_thread.join()
        if proc.stderr is not None:
            proc.stderr.close()

    if code != 0:
        stderr = "".join(stderr_chunks)
        raise GitError(f"git log exited {code}: {stderr.strip()[:500]}")
