"""create-project: bootstrap a new GitHub project from the command line.

One invocation creates the remote repository, clones it into the configured
projects directory, writes a README and an empty ``.gitignore`` and pushes
the initial commit.  See ``create_project.pipeline`` for the entry point.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
