"""Check out the most recent Git commit before a given time.

# Why?

Git can already answer "what did the code look like three days ago?", but
only by combining a couple of commands:

    git checkout "$(git rev-list -n 1 --before='3 days ago' HEAD)"

`git checkout-ago 3d` does the same thing in one step. It also tells you
which commit you were on, so that you can go back afterwards.

# Concepts

  * **Time phrase**: a relative duration such as "3 months", "2 days 4
    hours" or the shorthand "2d". It is measured backwards from now.
  * **Target commit**: the first commit in `HEAD`'s history, walked
    most-recent-first, whose committer timestamp is at or before the
    resolved instant.
  * **Checkout**: delegated to `git checkout`, which leaves you with a
    detached `HEAD` on the target commit.
"""
import os
import subprocess
from typing import List, TextIO

import pygit2

OidStr = str
"""Represents an object ID in the Git repository.

We don't use `pygit2.Oid` directly, since commit records are reported to the
user and compared as plain hex strings.
"""


def get_repo() -> pygit2.Repository:
    """Get the git repository associated with the current directory.

    Returns:
      The repository object associated with the current directory.

    Raises:
      RuntimeError: If the repository could not be found.
    """
    repo_path = pygit2.discover_repository(os.getcwd())
    if repo_path is None:
        raise RuntimeError("Failed to discover repository")
    return pygit2.Repository(repo_path)


def run_git(out: TextIO, err: TextIO, git_executable: str, args: List[str]) -> int:
    """Run Git in a subprocess, and inform the user.

    This is suitable for commands which affect the working copy or should run
    hooks. We don't want our process to be responsible for that.

    Args:
      out: The output stream to write to.
      err: The error stream to write to.
      git_executable: The path to the `git` executable on disk.
      args: The list of arguments to pass to Git. Should not include the Git
        executable itself.

    Returns:
      The exit code of Git (non-zero signifies error).
    """
    args = [git_executable, *args]
    out.write(f"checkout-ago: {' '.join(args)}\n")
    out.flush()
    err.flush()

    result = subprocess.run(args, stdout=out, stderr=err)
    return result.returncode


def get_head_oid(repo: pygit2.Repository) -> pygit2.Oid:
    """Get the OID for the repository's `HEAD` reference.

    Args:
      repo: The Git repository.

    Returns:
      The OID of the commit that `HEAD` currently points to.
    """
    # We don't use `repo.head`, because that resolves the HEAD reference
    # (e.g. into refs/head/master). We want the commit itself, whether or
    # not `HEAD` is detached.
    head_ref = repo.references["HEAD"]
    return head_ref.resolve().target


def is_config_enabled(repo: pygit2.Repository, name: str, default: bool) -> bool:
    """Read a boolean `checkoutAgo.*` setting from the repository config.

    Args:
      repo: The Git repository.
      name: The name of the setting, without the `checkoutAgo.` prefix.
      default: The value to use if the setting is not present.

    Returns:
      Whether the setting is enabled.
    """
    name = f"checkoutAgo.{name}"
    try:
        return repo.config.get_bool(name)
    except KeyError:
        return default
