"""Git operations: clone the new remote and publish the initial commit.

All git invocations go through the narrow ``GitRunner`` protocol (run one
subcommand in one directory).  ``GitCLI`` is the real implementation that
shells out to ``git``; tests substitute a recording fake.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .utils import run_command

GITHUB_SSH_HOST = "git@github.com"
INITIAL_COMMIT_MESSAGE = "initial commit"


@dataclass(frozen=True)
class GitResult:
    """Outcome of a single git invocation."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitError(Exception):
    """Raised when a git step exits non-zero or cannot be started."""

    def __init__(self, message: str, step: str = "", stderr: str = ""):
        self.step = step
        self.stderr = stderr
        super().__init__(message)


class GitRunner(Protocol):
    """Runs ``git <subcommand> <args...>`` inside *cwd*."""

    async def run(self, subcommand: str, *args: str, cwd: Path) -> GitResult: ...


class GitCLI:
    """``GitRunner`` that executes the ``git`` binary found on ``PATH``."""

    def __init__(self, executable: str = "git") -> None:
        self.executable = executable

    async def run(self, subcommand: str, *args: str, cwd: Path) -> GitResult:
        cmd = [self.executable, subcommand, *args]
        try:
            returncode, stdout, stderr = await run_command(cmd, cwd=cwd)
        except OSError as exc:
            if not Path(cwd).is_dir():
                raise GitError(
                    f"Cannot run git in {cwd}: not an accessible directory ({exc.strerror})",
                    step=subcommand,
                ) from exc
            if isinstance(exc, FileNotFoundError):
                raise GitError(
                    f"git executable not found: {self.executable}", step=subcommand
                ) from exc
            raise GitError(f"Failed to run git {subcommand}: {exc}", step=subcommand) from exc
        return GitResult(returncode=returncode, stdout=stdout, stderr=stderr)


def remote_url(username: str, name: str, host: str = GITHUB_SSH_HOST) -> str:
    """SSH-style remote reference, e.g. ``git@github.com:octocat/my-app.git``."""
    return f"{host}:{username}/{name}.git"


async def _step(git: GitRunner, label: str, subcommand: str, *args: str, cwd: Path) -> None:
    result = await git.run(subcommand, *args, cwd=cwd)
    if not result.ok:
        raise GitError(
            f"Failed to {label} (git {subcommand} exited {result.returncode})",
            step=subcommand,
            stderr=result.stderr,
        )


async def clone_remote(
    git: GitRunner,
    name: str,
    username: str,
    projects_dir: Path,
    host: str = GITHUB_SSH_HOST,
) -> Path:
    """Clone ``<host>:<username>/<name>.git`` into *projects_dir*.

    Returns:
        The directory git is expected to have created, ``projects_dir / name``.

    Raises:
        GitError: If ``git clone`` exits non-zero.
    """
    await _step(
        git, "clone repository", "clone", remote_url(username, name, host), cwd=projects_dir
    )
    return projects_dir / name


async def publish(git: GitRunner, project_path: Path, branch: str) -> None:
    """Stage everything, commit and push to *branch* on ``origin``.

    The local branch is renamed to *branch* before pushing so the commit lands
    on the remote's default branch whatever ``init.defaultBranch`` says.
    Steps run strictly in order; the first failure stops the sequence.

    Raises:
        GitError: Naming the step that failed.
    """
    await _step(git, "add changes", "add", ".", cwd=project_path)
    await _step(git, "commit changes", "commit", "-m", INITIAL_COMMIT_MESSAGE, cwd=project_path)
    await _step(git, "rename branch", "branch", "-M", branch, cwd=project_path)
    await _step(git, "push changes", "push", "origin", branch, cwd=project_path)
