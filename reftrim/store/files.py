"""Compare-before-write helpers shared by every file reftrim produces."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def write_if_changed(path: Path, text: str, *, ignore_case: bool = False) -> bool:
    """Write *text* to *path* unless the file already holds the same content.

    Returns True when a physical write happened. Identical content leaves the
    file (and its modification time) untouched so incremental builds that key
    on it are not invalidated.
    """
    path = Path(path)
    data = text.encode("utf-8")

    if path.exists():
        old = path.read_bytes()
        if ignore_case:
            same = old.decode("utf-8", errors="replace").casefold() == text.casefold()
        else:
            same = old == data
        if same:
            logger.debug("Skipping write of unchanged file %s", path)
            return False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return True
