from __future__ import annotations

import datetime as dt
import logging
from collections import Counter
from collections.abc import Iterable
from pathlib import Path

from .git import iter_commits, resolve_head
from .heatmap_registry import RegistryError, load_registry
from .heatmap_render import print_commits_stats
from .models import OUT_OF_RANGE, WINDOW_DAYS, CommitRecord, GitError

logger = logging.getLogger(__name__)


def beginning_of_day(moment: dt.datetime) -> dt.date:
    # local calendar day, whatever offset the committer recorded
    return moment.astimezone().date()


def count_days_since(day: dt.date, today: dt.date) -> int:
    """
    Count whole calendar days from `day` up to `today`.

    Steps one calendar day at a time, so DST changes never shorten or stretch
    a day. Returns OUT_OF_RANGE once the count passes WINDOW_DAYS, and a
    negative count for days after `today`.
    """
    if day > today:
        return -(day - today).days
    days = 0
    while day < today:
        day += dt.timedelta(days=1)
        days += 1
        if days > WINDOW_DAYS:
            return OUT_OF_RANGE
    return days


def new_commit_counts() -> dict[int, int]:
    return {bucket: 0 for bucket in range(WINDOW_DAYS + 1)}


def fill_commits(email: str, commits: Iterable[CommitRecord], today: dt.date) -> Counter[int]:
    counts: Counter[int] = Counter()
    for commit in commits:
        if commit.author_email != email:
            continue
        days = count_days_since(beginning_of_day(commit.committed_at), today)
        if days < 0 or days > WINDOW_DAYS:
            continue
        counts[days] += 1
    return counts


def repository_commit_counts(email: str, repo: Path, today: dt.date) -> Counter[int] | None:
    try:
        head = resolve_head(repo)
        return fill_commits(email, iter_commits(repo, head), today)
    except (GitError, OSError) as e:
        logger.error("Error reading repository %s: %s", repo, e)
        return None


def aggregate(email: str, repository_paths: Iterable[str], today: dt.date | None = None) -> dict[int, int]:
    if today is None:
        today = dt.date.today()
    commits = new_commit_counts()
    for repo in repository_paths:
        repo_counts = repository_commit_counts(email, Path(repo), today)
        if repo_counts is None:
            continue
        for bucket, n in repo_counts.items():
            commits[bucket] += n
    return commits


def stats(email: str, *, store_path: Path, color: bool = True, today: dt.date | None = None) -> dict[int, int] | None:
    try:
        repositories = load_registry(store_path)
    except RegistryError as e:
        logger.error("Error processing repositories: %s", e)
        return None
    if today is None:
        today = dt.date.today()
    logger.info("Aggregating commits by %r across %d repositories", email, len(repositories))
    commits = aggregate(email, repositories, today=today)
    print_commits_stats(commits, today=today, color=color)
    return commits
