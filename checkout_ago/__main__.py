"""Main entry-point."""
import argparse
import logging
import os
import sys
from typing import List, TextIO

from .checkout import PARSE_ERROR_EXIT_CODE, checkout_ago


def main(argv: List[str], *, out: TextIO, err: TextIO, git_executable: str) -> int:
    """Parse the command-line arguments and run the checkout.

    Args:
      argv: List of command-line arguments (e.g. from `sys.argv`).
      out: Output stream to write to (may be a TTY).
      err: Error stream to write to.
      git_executable: The path to the `git` executable on disk.

    Returns:
      Exit code (0 denotes successful exit).
    """
    parser = argparse.ArgumentParser(
        prog="git-checkout-ago",
        description="Check out the most recent Git commit before a given time.",
        add_help=False,
    )
    parser.add_argument(
        "-h", "--help", action="store_true", help="show this help message and exit"
    )
    parser.add_argument(
        "ago",
        metavar="TIME",
        type=str,
        nargs="?",
        help='Time before now (e.g. "2 days", "1 month 2 weeks", 2d, 3h, 1w).',
    )
    parser.add_argument(
        "--print",
        "--show",
        dest="print_only",
        action="store_true",
        help="Only print where you are and where you would jump to.",
    )
    parser.add_argument(
        "--first-parent",
        dest="first_parent",
        action="store_true",
        default=None,
        help="Only follow the first parent of merge commits.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging."
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.help:
        parser.print_help(file=out)
        return 0
    elif args.ago is None:
        parser.print_usage(file=out)
        return PARSE_ERROR_EXIT_CODE
    else:
        return checkout_ago(
            out=out,
            err=err,
            git_executable=git_executable,
            ago=args.ago,
            print_only=args.print_only,
            first_parent=args.first_parent,
        )


def entry_point() -> None:
    # `PATH_TO_GIT` set in testing.
    git_executable = os.environ.get("PATH_TO_GIT", "git")

    sys.exit(
        main(
            sys.argv[1:], out=sys.stdout, err=sys.stderr, git_executable=git_executable
        )
    )


if __name__ == "__main__":
    entry_point()
