"""create-project orchestrator and CLI front-end.

Runs the project bootstrap as a single linear sequence:

1. load the configuration file,
2. confirm with the user,
3. create the GitHub repository,
4. clone it into ``projects_dir``,
5. write ``README.md`` and ``.gitignore``,
6. commit and push.

Any failure stops the run; nothing that already happened is rolled back.

Usage::

    create-project my-new-app
    create-project --gen-config
    python -m create_project --help
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TextIO

from pydantic import BaseModel
from rich.console import Console

from .config import Config, ConfigError, generate_config, load_config
from .forge_client import ForgeAPI, ForgeClient, ForgeError, RemoteRepository, create_remote
from .git_ops import GitCLI, GitError, GitRunner, clone_remote, publish
from .scaffolder import ScaffoldError, build_title, write_scaffold
from .utils import (
    make_console,
    print_error,
    print_info,
    print_raw,
    print_success,
    print_warning,
)

PROG = "create-project"


class ProjectDescriptor(BaseModel):
    """The project being created: its name, local path and README title."""

    name: str
    path: Path
    title: str

    @classmethod
    def build(cls, name: str, config: Config) -> "ProjectDescriptor":
        return cls(name=name, path=config.projects_path / name, title=build_title(name))


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class Pipeline:
    """Sequences the bootstrap steps for one project.

    Attributes:
        config: Loaded configuration.
        forge: Repository-creation capability.
        git: Git capability.
        out: Console for progress messages.
        err: Console for warnings and errors.
    """

    def __init__(
        self,
        config: Config,
        forge: ForgeAPI,
        git: GitRunner,
        out: Console,
        err: Console,
    ) -> None:
        self.config = config
        self.forge = forge
        self.git = git
        self.out = out
        self.err = err

    def confirm(self, project: ProjectDescriptor, stdin: TextIO) -> bool:
        """Ask before doing anything irreversible.

        Proceeds on exactly ``y`` or an empty line.  End of input declines.
        """
        print_info(f"Create project {project.path} (y/n)", self.out)
        line = stdin.readline()
        if not line:
            return False
        return line.rstrip("\r\n") in ("y", "")

    async def run(self, project: ProjectDescriptor) -> RemoteRepository:
        """Create, clone, scaffold and publish *project*.

        Raises:
            ForgeError, GitError, ScaffoldError: From the step that failed.
        """
        print_info("Creating GitHub repository...", self.out)
        remote = await create_remote(project.name, self.forge)

        try:
            print_info(f"Cloning repository into {project.path}...", self.out)
            await clone_remote(
                self.git, project.name, self.config.gh_username, self.config.projects_path
            )

            print_info("Creating README.md and .gitignore...", self.out)
            write_scaffold(project.path, project.title)

            print_info("Committing changes to the repository...", self.out)
            await publish(self.git, project.path, remote.default_branch)
        except (GitError, ScaffoldError):
            self._warn_orphaned_remote(remote)
            raise

        return remote

    def _warn_orphaned_remote(self, remote: RemoteRepository) -> None:
        where = remote.html_url or f"{self.config.gh_username}/{remote.name}"
        print_warning(
            f"The remote repository {where} was created but the local setup did not "
            "finish. Delete it or complete the setup by hand.",
            self.err,
        )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


class UsageError(Exception):
    """Raised instead of argparse's own exit on bad command lines."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog=PROG,
        description="Creates new programming project",
        add_help=False,
        allow_abbrev=False,
    )
    p.add_argument(
        "name",
        nargs="?",
        default=None,
        metavar="NAME",
        help="project name in kebab-case",
    )
    p.add_argument("-h", "--help", action="store_true", help="shows this message")
    p.add_argument("--gen-config", action="store_true", help="generates config file")
    p.add_argument(
        "--force",
        action="store_true",
        help="with --gen-config, overwrite an existing config file",
    )
    return p


def _usage_error(message: str, parser: argparse.ArgumentParser, err: Console) -> int:
    print_error(message, err)
    print_raw(parser.format_help().rstrip("\n"), err)
    return 1


def _gen_config(force: bool, out: Console, err: Console) -> int:
    try:
        path = generate_config(force=force)
    except ConfigError as exc:
        print_error(str(exc), err)
        return 1
    print_success(f"Config created {path}", out)
    return 0


def _create_project(
    name: str,
    out: Console,
    err: Console,
    stdin: TextIO,
) -> int:
    print_info("Loading config file...", out)
    try:
        config, warnings = load_config()
    except ConfigError as exc:
        print_error(str(exc), err)
        return 1
    for warning in warnings:
        print_warning(warning, err)

    project = ProjectDescriptor.build(name, config)
    pipeline = Pipeline(
        config,
        forge=ForgeClient(token=config.gh_apikey),
        git=GitCLI(),
        out=out,
        err=err,
    )

    if not pipeline.confirm(project, stdin):
        return 0

    try:
        asyncio.run(pipeline.run(project))
    except ForgeError as exc:
        print_error(str(exc), err)
        if exc.details:
            print_raw(exc.details, err)
        return 1
    except GitError as exc:
        print_error(str(exc), err)
        if exc.stderr:
            print_raw(exc.stderr, err)
        return 1
    except ScaffoldError as exc:
        print_error(str(exc), err)
        return 1

    print_success("Success", out)
    return 0


def main(
    argv: list[str] | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    stdin: TextIO | None = None,
) -> int:
    """CLI entry point for ``create-project`` and ``python -m create_project``.

    Returns:
        The process exit status: 0 on success or when the user declines,
        1 on any error, 130 when interrupted.
    """
    out = make_console(stdout)
    err = make_console(stderr, stderr=True)
    raw_argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()

    if not raw_argv:
        return _usage_error("Not enough arguments", parser, err)

    first = raw_argv[0]
    if first.startswith("-") and not first.startswith("--") and first != "-h":
        # A single leading dash is part of a project name, not an option.
        raw_argv.insert(0, "--")

    try:
        args, extras = parser.parse_known_args(raw_argv)
    except UsageError as exc:
        return _usage_error(str(exc), parser, err)

    if args.help:
        print_raw(parser.format_help().rstrip("\n"), out)
        return 0

    unknown = [arg for arg in extras if arg.startswith("-")]
    if unknown:
        return _usage_error(f"Unknown option: {unknown[0]}", parser, err)
    if extras:
        return _usage_error(f"Unexpected argument: {extras[0]}", parser, err)

    if args.gen_config:
        return _gen_config(args.force, out, err)

    if args.name is None:
        return _usage_error("Not enough arguments", parser, err)

    try:
        return _create_project(args.name, out, err, stdin or sys.stdin)
    except KeyboardInterrupt:
        print_error("Aborted", err)
        return 130


if __name__ == "__main__":
    sys.exit(main())
