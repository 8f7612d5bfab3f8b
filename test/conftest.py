from typing import Iterator, List

import py
import pytest
from _pytest.config.argparsing import Parser
from _pytest.fixtures import SubRequest

from helpers import Git


def pytest_addoption(parser: Parser) -> None:
    parser.addoption(
        "--git-path",
        type=str,
        default=None,
        help="The path to the Git executable to use. If not provided, uses the system Git.",
    )


@pytest.fixture
def git_executable(request: SubRequest) -> str:
    git_executable: str = request.config.getoption("--git-path")
    if git_executable is not None:
        return git_executable
    else:
        return "git"


@pytest.fixture
def git(tmpdir: py.path.local, git_executable: str) -> Iterator[Git]:
    with tmpdir.as_cwd():
        yield Git(tmpdir, git_executable=git_executable)


@pytest.fixture
def linear_history(git: Git) -> List[str]:
    """A repo with commits `initial`, `test1`, `test2` and `test3`, each one
    hour after the previous one, with `master` checked out at `test3`.

    Returns:
      The commit hashes, oldest first.
    """
    git.init_repo()
    oids = [git.rev_parse()]
    for i in range(1, 4):
        oids.append(git.commit_file(name=f"test{i}", time=i))
    return oids
