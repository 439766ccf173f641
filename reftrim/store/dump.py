"""Used / unused reference dump files written next to the declared references file."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from reftrim.models import normalize_identity
from reftrim.store.files import write_if_changed

USED_REFERENCES_FILE_NAME = "_ReferenceTrimmer_UsedReferences.log"
UNUSED_REFERENCES_FILE_NAME = "_ReferenceTrimmer_UnusedReferences.log"


def dump_reference_info(
    used_modules: Iterable[str],
    offered_modules: Iterable[str],
    directory: Path,
) -> list[Path]:
    """Write sorted used and unused identities. Returns the files actually rewritten."""
    used = sorted(set(used_modules))
    used_keys = {normalize_identity(m) for m in used}
    unused = sorted({m for m in offered_modules if normalize_identity(m) not in used_keys})

    written: list[Path] = []
    for name, entries in ((USED_REFERENCES_FILE_NAME, used), (UNUSED_REFERENCES_FILE_NAME, unused)):
        path = Path(directory) / name
        if write_if_changed(path, "\n".join(entries), ignore_case=True):
            written.append(path)
    return written
