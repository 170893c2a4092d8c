"""Module entrypoint for ``python -m create_project``.

A thin wrapper around :func:`create_project.pipeline.main`; the return value
becomes the process exit status.
"""

from __future__ import annotations

import sys

from .pipeline import main

if __name__ == "__main__":
    sys.exit(main())
