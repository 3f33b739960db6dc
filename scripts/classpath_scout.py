#!/usr/bin/env python
"""
Thin CLI wrapper for project introspection.
Prefer using the console script entry point, but allow direct execution.
"""

import sys
from pathlib import Path

if __package__ in (None, ""):
    # Direct execution: make the repository root importable for ``src.*``
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.analysis.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
