"""create-project configuration.

The configuration lives in a plain ``key = value`` file under the user's
configuration directory::

    gh_apikey    = <token>
    gh_username  = <login>
    projects_dir = /absolute/path/to/dir

It is generated once with ``--gen-config``, edited by hand and then read on
every invocation.  The parsed values are validated with a Pydantic v2 model so
that an incomplete file is rejected as a whole instead of being partially used.
"""

from __future__ import annotations

import os
from pathlib import Path

import platformdirs
from pydantic import BaseModel, Field, ValidationError

APP_NAME = "create-project"
CONFIG_FILENAME = "config"
CONFIG_ENV_VAR = "CREATE_PROJECT_CONFIG"

CONFIG_TEMPLATE = (
    "gh_apikey    = github api key\n"
    "gh_username  = github username\n"
    "projects_dir = /absolute/path/to/dir\n"
)

KNOWN_KEYS = ("gh_username", "gh_apikey", "projects_dir")


class ConfigError(Exception):
    """Raised when the configuration file cannot be read, parsed or validated."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class Config(BaseModel):
    """Validated create-project settings.

    All three fields are required and must be non-empty.
    """

    gh_username: str = Field(..., min_length=1, description="GitHub login")
    gh_apikey: str = Field(..., min_length=1, repr=False, description="GitHub API token")
    projects_dir: str = Field(
        ..., min_length=1, description="Directory new projects are cloned into"
    )

    @property
    def projects_path(self) -> Path:
        """``projects_dir`` as a ``Path``."""
        return Path(self.projects_dir)


# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------


def config_path() -> Path:
    """Return the location of the configuration file.

    ``$CREATE_PROJECT_CONFIG`` wins when set; otherwise the file is
    ``<user config dir>/create-project/config``.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    base = platformdirs.user_config_dir(APP_NAME, appauthor=False, roaming=True)
    return Path(base) / CONFIG_FILENAME


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_config(text: str, path: Path | None = None) -> tuple[Config, list[str]]:
    """Parse the contents of a configuration file.

    Args:
        text: Raw file contents.
        path: Where *text* came from; only used in error messages.

    Returns:
        The validated ``Config`` and a list of warnings (one per unknown key).

    Raises:
        ConfigError: On a malformed line or when a required field is missing.
    """
    values: dict[str, str] = {}
    warnings: list[str] = []
    where = f"{path}" if path else "config"

    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if stripped.count("=") != 1:
            raise ConfigError(
                f"{where}:{lineno}: expected exactly one '=' in {line!r}", path=path
            )

        key, value = (part.strip() for part in stripped.split("="))
        if key in KNOWN_KEYS:
            values[key] = value
        else:
            warnings.append(f"Unknown config field: {key}")

    try:
        config = Config.model_validate(values)
    except ValidationError as exc:
        missing = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        raise ConfigError(
            f"Config is missing required fields: {', '.join(missing)}", path=path
        ) from exc

    return config, warnings


def load_config(path: Path | None = None) -> tuple[Config, list[str]]:
    """Read and parse the configuration file.

    Args:
        path: File to read. Defaults to ``config_path()``.

    Returns:
        The validated ``Config`` and any non-fatal warnings.

    Raises:
        ConfigError: If the file cannot be opened or is invalid.
    """
    target = path or config_path()
    try:
        text = target.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to open config file: {exc}", path=target) from exc
    return parse_config(text, path=target)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def generate_config(path: Path | None = None, force: bool = False) -> Path:
    """Write the configuration template.

    Parent directories are created readable by the owner only, and the file
    itself is ``0600`` since it ends up holding an API token.

    Args:
        path: Destination file. Defaults to ``config_path()``.
        force: Overwrite an existing file.

    Returns:
        The path that was written.

    Raises:
        ConfigError: If the file exists (and *force* is false) or cannot be written.
    """
    target = path or config_path()
    if target.exists() and not force:
        raise ConfigError(
            f"Config already exists at {target} (use --force to overwrite)", path=target
        )

    try:
        target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        target.write_text(CONFIG_TEMPLATE, encoding="utf-8")
        os.chmod(target, 0o600)
    except OSError as exc:
        raise ConfigError(f"Failed to write config file: {exc}", path=target) from exc
    return target
