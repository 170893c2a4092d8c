"""README and ``.gitignore`` scaffolding for a freshly cloned project."""

from __future__ import annotations

import os
from pathlib import Path

FILE_MODE = 0o644


class ScaffoldError(Exception):
    """Raised when a scaffold file cannot be written."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


def build_title(name: str) -> str:
    """Turn a kebab-case project name into a human-readable title.

    Each hyphen-delimited word gets its first character uppercased; the rest
    of the word is left alone.  Empty words (leading, trailing or doubled
    hyphens) are skipped.  A name made only of hyphens is returned unchanged.

    Examples::

        build_title("my-cool-project") -> "My Cool Project"
        build_title("double--hyphen")  -> "Double Hyphen"
        build_title("x")               -> "X"
    """
    words = [word[0].upper() + word[1:] for word in name.split("-") if word]
    if not words:
        return name
    return " ".join(words)


def _write_file(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
        os.chmod(path, FILE_MODE)
    except OSError as exc:
        raise ScaffoldError(f"Failed to create {path.name}: {exc}", path=path) from exc


def write_scaffold(project_path: Path, title: str) -> list[Path]:
    """Create an empty ``.gitignore`` and a ``README.md`` titled *title*.

    Both files are written with mode ``0644``; existing files are truncated.

    Returns:
        The paths written, ``.gitignore`` first.

    Raises:
        ScaffoldError: On any filesystem failure.
    """
    gitignore = project_path / ".gitignore"
    readme = project_path / "README.md"

    _write_file(gitignore, "")
    _write_file(readme, f"# {title}\n")
    return [gitignore, readme]
