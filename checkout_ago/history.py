"""Find the commit that was current at a given point in time.

History is walked from `HEAD` in the same order as `git rev-list` walks it by
default: most recent committer date first. We take the first commit in that
order whose timestamp is at or before the target instant, like
`git rev-list -n 1 --before=...` does. Commits with out-of-order timestamps
(e.g. after a rebase) are not re-sorted; traversal order wins.
"""
import datetime
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

import pygit2

from . import OidStr


@dataclass(frozen=True)
class CommitRecord:
    """The parts of a commit needed to select and report it."""

    oid: OidStr
    timestamp: datetime.datetime
    """The committer timestamp, in the committer's own timezone."""

    parent_oids: Tuple[OidStr, ...]
    summary: str
    """The first line of the commit message."""

    @classmethod
    def from_commit(cls, commit: pygit2.Commit) -> "CommitRecord":
        offset = datetime.timezone(
            datetime.timedelta(minutes=commit.commit_time_offset)
        )
        return cls(
            oid=str(commit.id),
            timestamp=datetime.datetime.fromtimestamp(commit.commit_time, tz=offset),
            parent_oids=tuple(str(parent_id) for parent_id in commit.parent_ids),
            summary=commit.message.split("\n", 1)[0],
        )


class NoMatchingCommit(Exception):
    """Raised when the whole history is newer than the requested instant."""

    def __init__(self, instant: datetime.datetime, num_commits_scanned: int) -> None:
        super().__init__(instant, num_commits_scanned)
        self.instant = instant
        self.num_commits_scanned = num_commits_scanned


def iter_history(
    repo: pygit2.Repository, start_oid: pygit2.Oid, first_parent: bool = False
) -> Iterator[CommitRecord]:
    """Lazily walk the history reachable from a commit.

    Args:
      repo: The Git repository.
      start_oid: The commit to start from. It is yielded first.
      first_parent: If set, only follow the first parent of merge commits.

    Returns:
      The commits, most recent first.
    """
    walker = repo.walk(start_oid, pygit2.GIT_SORT_TIME)
    if first_parent:
        walker.simplify_first_parent()
    for commit in walker:
        yield CommitRecord.from_commit(commit)


def select_commit(
    history: Iterable[CommitRecord], instant: datetime.datetime
) -> Optional[CommitRecord]:
    """Select the first commit in `history` made at or before `instant`.

    Args:
      history: The commits to scan, in traversal order. Consumed only up to
        the first match.
      instant: The target instant. Must be timezone-aware.

    Returns:
      The selected commit, or `None` if no commit is old enough.
    """
    for record in history:
        if record.timestamp <= instant:
            logging.debug(f"Selected commit {record.oid:.8} from {record.timestamp}")
            return record
        logging.debug(
            f"Commit {record.oid:.8} from {record.timestamp} is too recent, skipping"
        )
    return None


def find_commit_before(
    repo: pygit2.Repository,
    start_oid: pygit2.Oid,
    instant: datetime.datetime,
    first_parent: bool = False,
) -> CommitRecord:
    """Find the commit that was current at `instant`.

    Args:
      repo: The Git repository.
      start_oid: The commit to start walking backwards from (usually `HEAD`).
      instant: The target instant.
      first_parent: If set, only follow the first parent of merge commits.

    Returns:
      The first commit in the history of `start_oid` made at or before
      `instant`.

    Raises:
      NoMatchingCommit: If `instant` predates the entire history.
    """
    num_commits_scanned = 0

    def counted(history: Iterable[CommitRecord]) -> Iterator[CommitRecord]:
        nonlocal num_commits_scanned
        for record in history:
            num_commits_scanned += 1
            yield record

    history = iter_history(repo=repo, start_oid=start_oid, first_parent=first_parent)
    result = select_commit(counted(history), instant=instant)
    if result is None:
        raise NoMatchingCommit(instant=instant, num_commits_scanned=num_commits_scanned)
    return result
