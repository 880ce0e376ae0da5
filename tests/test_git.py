from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest

from conftest import _run, commit_at, init_repo
from git_heatmap.git import get_repo_toplevel, iter_commits, resolve_head
from git_heatmap.models import GitError


def test_iter_commits_streams_newest_first(tmp_path: Path) -> None:
    repo = init_repo(tmp_path / "repo")
    tz = dt.timezone(dt.timedelta(hours=2))
    commit_at(repo, email="a@x.com", when=dt.datetime(2025, 1, 1, 10, 0, tzinfo=tz), message="first")
    commit_at(repo, email="b@x.com", when=dt.datetime(2025, 1, 3, 23, 30, tzinfo=tz), message="second")

    commits = list(iter_commits(repo, resolve_head(repo)))

    assert [c.author_email for c in commits] == ["b@x.com", "a@x.com"]
    assert commits[0].committed_at == dt.datetime(2025, 1, 3, 23, 30, tzinfo=tz)
    assert commits[0].committed_at.utcoffset() == dt.timedelta(hours=2)
    assert all(len(c.sha) == 40 for c in commits)


def test_iter_commits_is_restartable_and_closes_early(tmp_path: Path) -> None:
    repo = init_repo(tmp_path / "repo")
    for i in range(3):
        commit_at(repo, email="a@x.com", when=dt.datetime(2025, 1, 1 + i, tzinfo=dt.timezone.utc), message=f"c{i}")

    stream = iter_commits(repo)
    first = next(stream)
    stream.close()

    again = list(iter_commits(repo))
    assert len(again) == 3
    assert again[0] == first


def test_iter_commits_bad_revision_raises(tmp_path: Path) -> None:
    repo = init_repo(tmp_path / "repo")
    commit_at(repo, email="a@x.com", when=dt.datetime(2025, 1, 1, tzinfo=dt.timezone.utc))

    with pytest.raises(GitError):
        list(iter_commits(repo, "no-such-branch"))


def test_resolve_head_errors(tmp_path: Path) -> None:
    empty = init_repo(tmp_path / "empty")
    with pytest.raises(GitError):
        resolve_head(empty)
    with pytest.raises(GitError):
        resolve_head(tmp_path / "missing")
    (tmp_path / "plain").mkdir()
    with pytest.raises(GitError):
        resolve_head(tmp_path / "plain")


def test_resolve_head_rejects_subdirectory_of_repo(tmp_path: Path) -> None:
    repo = init_repo(tmp_path / "repo")
    commit_at(repo, email="a@x.com", when=dt.datetime(2025, 1, 1, tzinfo=dt.timezone.utc))
    sub = repo / "sub"
    sub.mkdir()

    assert get_repo_toplevel(sub) == repo.resolve()
    with pytest.raises(GitError):
        resolve_head(sub)


def test_iter_commits_with_worktree_file_named_head(tmp_path: Path) -> None:
    repo = init_repo(tmp_path / "repo")
    (repo / "HEAD").write_text("not a ref\n", encoding="utf-8")
    _run(["git", "add", "HEAD"], cwd=repo)
    commit_at(repo, email="a@x.com", when=dt.datetime(2025, 1, 1, tzinfo=dt.timezone.utc))

    commits = list(iter_commits(repo))

    assert [c.author_email for c in commits] == ["a@x.com"]
