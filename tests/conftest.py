"""Shared pytest fixtures for the create-project test suite.

Provides reusable fixtures for:
- A configuration file in a temporary directory (wired via $CREATE_PROJECT_CONFIG)
- A fake forge API returning canned responses
- A fake git runner that records every call and can be told to fail
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from create_project.config import CONFIG_ENV_VAR
from create_project.forge_client import ForgeResponse
from create_project.git_ops import GitResult


@pytest.fixture(autouse=True)
def _plain_console_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep Rich from forcing ANSI codes into captured output."""
    for var in ("FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

SAMPLE_CONFIG = (
    "gh_apikey    = ghp_testtoken123\n"
    "gh_username  = octocat\n"
    "projects_dir = {projects_dir}\n"
)


@pytest.fixture
def projects_dir(tmp_path: Path) -> Path:
    """Directory that new projects are cloned into."""
    directory = tmp_path / "projs"
    directory.mkdir()
    return directory


@pytest.fixture
def config_file(tmp_path: Path, projects_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A valid config file, pointed to by ``$CREATE_PROJECT_CONFIG``."""
    path = tmp_path / "config" / "create-project" / "config"
    path.parent.mkdir(parents=True)
    path.write_text(SAMPLE_CONFIG.format(projects_dir=projects_dir), encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    return path


# ---------------------------------------------------------------------------
# Fake forge
# ---------------------------------------------------------------------------


class FakeForge:
    """``ForgeAPI`` stand-in that returns one canned response."""

    def __init__(self, status_code: int = 201, body: str | dict | None = None) -> None:
        self.status_code = status_code
        self.body = body
        self.calls: list[str] = []

    async def create_repository(self, name: str) -> ForgeResponse:
        self.calls.append(name)
        body = self.body
        if body is None:
            body = {"name": name, "default_branch": "main"}
        if not isinstance(body, str):
            body = json.dumps(body)
        return ForgeResponse(status_code=self.status_code, body=body)


@pytest.fixture
def fake_forge() -> FakeForge:
    return FakeForge()


@pytest.fixture
def make_forge() -> type[FakeForge]:
    """The ``FakeForge`` class, for tests that need a custom response."""
    return FakeForge


# ---------------------------------------------------------------------------
# Fake git
# ---------------------------------------------------------------------------


@dataclass
class GitCall:
    subcommand: str
    args: tuple[str, ...]
    cwd: Path


@dataclass
class FakeGit:
    """Recording ``GitRunner``.

    ``clone`` creates the target directory the way real git would.  Any
    subcommand listed in ``fail_on`` exits with status 1.
    """

    fail_on: set[str] = field(default_factory=set)
    calls: list[GitCall] = field(default_factory=list)

    async def run(self, subcommand: str, *args: str, cwd: Path) -> GitResult:
        self.calls.append(GitCall(subcommand, args, cwd))
        if subcommand in self.fail_on:
            return GitResult(returncode=1, stderr=f"fatal: {subcommand} failed")
        if subcommand == "clone":
            repo = args[-1].rsplit("/", 1)[-1].removesuffix(".git")
            (cwd / repo).mkdir()
        return GitResult(returncode=0)

    @property
    def subcommands(self) -> list[str]:
        return [call.subcommand for call in self.calls]


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()
