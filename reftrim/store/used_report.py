"""Reading the compiler's used-module report."""

from __future__ import annotations

import logging
from pathlib import Path

from reftrim.errors import InputMissingError, UsedModuleReportError

logger = logging.getLogger(__name__)


def load_used_modules(path: Path) -> frozenset[str]:
    """Read one module identity per line. Blank lines are ignored."""
    path = Path(path)
    if not path.exists():
        raise InputMissingError("Used module report", path)

    try:
        text = path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        raise UsedModuleReportError(f"Used module report {path} is not valid UTF-8: {e}") from e

    used = frozenset(line.strip() for line in text.splitlines() if line.strip())
    logger.debug("Loaded %d used module(s) from %s", len(used), path)
    return used
