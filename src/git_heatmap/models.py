from __future__ import annotations

import dataclasses
import datetime as dt
import enum

WINDOW_DAYS = 183
WEEKS_IN_WINDOW = 26
OUT_OF_RANGE = 9999


class GitError(RuntimeError):
    pass


@dataclasses.dataclass(frozen=True)
class CommitRecord:
    sha: str
    author_email: str
    committed_at: dt.datetime  # committer timestamp, in the committer's own offset


class ColorTier(enum.Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    TODAY = "today"
