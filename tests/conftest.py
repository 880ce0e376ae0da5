from __future__ import annotations

import datetime as dt
import os
import subprocess
from pathlib import Path

import pytest


def _run(cmd: list[str], *, cwd: Path, env: dict[str, str] | None = None) -> str:
    proc = subprocess.run(cmd, cwd=str(cwd), env=env, check=True, capture_output=True, text=True)
    return proc.stdout


def init_repo(repo: Path) -> Path:
    repo.mkdir(parents=True, exist_ok=True)
    _run(["git", "init"], cwd=repo)
    _run(["git", "config", "user.name", "Test User"], cwd=repo)
    _run(["git", "config", "user.email", "test@example.com"], cwd=repo)
    _run(["git", "config", "commit.gpgsign", "false"], cwd=repo)
    return repo


def commit_at(repo: Path, *, email: str, when: dt.datetime, message: str = "change") -> None:
    marker = repo / "log.txt"
    with marker.open("a", encoding="utf-8") as f:
        f.write(message + "\n")
    _run(["git", "add", "log.txt"], cwd=repo)
    env = os.environ.copy()
    env["GIT_AUTHOR_NAME"] = "Someone"
    env["GIT_AUTHOR_EMAIL"] = email
    env["GIT_AUTHOR_DATE"] = when.isoformat()
    env["GIT_COMMITTER_DATE"] = when.isoformat()
    _run(["git", "commit", "-m", message], cwd=repo, env=env)


def local_noon(day: dt.date) -> dt.datetime:
    return dt.datetime.combine(day, dt.time(12, 0)).astimezone()


@pytest.fixture
def today() -> dt.date:
    return dt.date.today()
