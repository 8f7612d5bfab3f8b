"""Check out the commit that was current some time ago."""
import datetime
import logging
import time
from typing import Optional, TextIO

import colorama

from . import get_head_oid, get_repo, is_config_enabled, run_git
from .formatting import make_glyphs, pluralize, render_commit
from .history import CommitRecord, NoMatchingCommit, find_commit_before
from .timespec import ParseError, parse_time_spec, resolve_time_spec

PARSE_ERROR_EXIT_CODE = 2
NO_MATCHING_COMMIT_EXIT_CODE = 3
NO_REPOSITORY_EXIT_CODE = 4


def checkout_ago(
    *,
    out: TextIO,
    err: TextIO,
    git_executable: str,
    ago: str,
    print_only: bool,
    first_parent: Optional[bool] = None,
    now: Optional[datetime.datetime] = None,
) -> int:
    """Check out the most recent commit made before the given time.

    Args:
      out: The output stream to write to.
      err: The error stream to write to.
      git_executable: The path to the `git` executable on disk.
      ago: How long ago, as a relative time phrase like "2 days" or "3h".
      print_only: If set, only report where we are and where we would go.
      first_parent: Whether to only follow first parents when walking the
        history. If not provided, read from the `checkoutAgo.firstParent`
        config setting.
      now: The reference time. Defaults to the current local time.

    Returns:
      Exit code (0 denotes successful exit). A failed checkout returns the
      exit code of Git itself.
    """
    try:
        spec = parse_time_spec(ago)
    except ParseError as e:
        err.write(f"error: {e}\n")
        return PARSE_ERROR_EXIT_CODE

    try:
        repo = get_repo()
    except RuntimeError as e:
        err.write(f"error: {e}\n")
        return NO_REPOSITORY_EXIT_CODE

    if now is None:
        now = datetime.datetime.fromtimestamp(time.time()).astimezone()
    if first_parent is None:
        first_parent = is_config_enabled(repo=repo, name="firstParent", default=False)
    calendar_units_first = is_config_enabled(
        repo=repo, name="calendarUnitsFirst", default=False
    )

    try:
        instant = resolve_time_spec(
            spec, now=now, calendar_units_first=calendar_units_first
        )
    except ParseError as e:
        err.write(f"error: {e}\n")
        return PARSE_ERROR_EXIT_CODE
    logging.debug(f"Resolved {ago!r} to {instant.isoformat()}")

    if repo.head_is_unborn:
        err.write("error: no commits found: HEAD does not point to a commit yet\n")
        return NO_MATCHING_COMMIT_EXIT_CODE

    head_oid = get_head_oid(repo)
    try:
        target = find_commit_before(
            repo=repo, start_oid=head_oid, instant=instant, first_parent=first_parent
        )
    except NoMatchingCommit as e:
        searched = pluralize(
            amount=e.num_commits_scanned, singular="commit", plural="commits"
        )
        err.write(
            f"error: no commit found before {e.instant.isoformat()} "
            f"(searched {searched})\n"
        )
        return NO_MATCHING_COMMIT_EXIT_CODE

    glyphs = make_glyphs(out)
    now_timestamp = int(now.timestamp())
    head = CommitRecord.from_commit(repo[head_oid])
    for (label, description) in [
        ("Current HEAD:", render_commit(glyphs, head, now_timestamp)),
        ("Target commit:", render_commit(glyphs, target, now_timestamp)),
        ("To return:", f"git checkout {head.oid}"),
    ]:
        label = glyphs.style(style=colorama.Style.BRIGHT, message=label)
        out.write(f"{label} {description}\n")

    if print_only:
        return 0

    return run_git(
        out=out, err=err, git_executable=git_executable, args=["checkout", target.oid]
    )
