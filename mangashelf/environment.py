"""Dotenv loading for mangashelf.

Files are read in this order, and a variable already present in the
process environment is never overwritten:

1. every path in ``MANGASHELF_ENV_FILE`` (``os.pathsep`` separated)
2. ``.env`` in the project root
3. ``.env.<MANGASHELF_ENV>`` when that variable is set
4. ``.env.local``
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]

_loaded: Optional[Tuple[Path, ...]] = None


def dotenv_candidates() -> List[Path]:
    """Return the dotenv paths to try, deduplicated and in load order."""
    paths: List[Path] = [
        Path(value.strip()).expanduser()
        for value in os.environ.get("MANGASHELF_ENV_FILE", "").split(os.pathsep)
        if value.strip()
    ]

    names = [".env"]
    target = os.environ.get("MANGASHELF_ENV", "").strip()
    if target:
        names.append(f".env.{target}")
    names.append(".env.local")
    paths.extend(PROJECT_ROOT / name for name in names)

    unique: List[Path] = []
    for path in paths:
        resolved = path.resolve()
        if resolved not in unique:
            unique.append(resolved)
    return unique


def load_environment(*, force: bool = False) -> Tuple[Path, ...]:
    """Load the dotenv files once and return the ones that were read.

    Later calls return the first result unless ``force`` is set.
    """
    global _loaded
    if _loaded is None or force:
        _loaded = tuple(
            path
            for path in dotenv_candidates()
            if path.is_file() and load_dotenv(path, override=False)
        )
    return _loaded


__all__ = ["PROJECT_ROOT", "dotenv_candidates", "load_environment"]
