"""Declared reference store: ordered, tab-separated records shared between build phases.

Each line is ``identity<TAB>kind<TAB>display_label``. The label is the last
field and may itself contain tabs; the split is bounded to the first two.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from reftrim.errors import (
    DeclaredReferenceFormatError,
    DeclaredReferenceParseError,
    InputMissingError,
)
from reftrim.models import DeclaredReference, ReferenceKind
from reftrim.store.files import write_if_changed

logger = logging.getLogger(__name__)

DECLARED_REFERENCES_FILE_NAME = "_ReferenceTrimmer_DeclaredReferences.tsv"

_KIND_TO_TOKEN: dict[ReferenceKind, str] = {
    ReferenceKind.DIRECT: "Reference",
    ReferenceKind.MODULE_REF: "ProjectReference",
    ReferenceKind.PACKAGE_REF: "PackageReference",
}
_TOKEN_TO_KIND: dict[str, ReferenceKind] = {token: kind for kind, token in _KIND_TO_TOKEN.items()}

_LINE_BREAKS = ("\r", "\n")


def kind_to_token(kind: ReferenceKind) -> str:
    try:
        return _KIND_TO_TOKEN[kind]
    except KeyError:
        raise DeclaredReferenceFormatError(f"No token for reference kind {kind!r}") from None


def token_to_kind(token: str) -> ReferenceKind:
    try:
        return _TOKEN_TO_KIND[token]
    except KeyError:
        raise ValueError(f"Unknown reference kind token {token!r}") from None


def format_declared_reference(record: DeclaredReference) -> str:
    """Serialize one record, rejecting characters that would corrupt the layout."""
    for name, value in (("identity", record.identity), ("display label", record.display_label)):
        if any(ch in value for ch in _LINE_BREAKS):
            raise DeclaredReferenceFormatError(
                f"Line break in {name} of declared reference {record.display_label!r}"
            )
    if "\t" in record.identity:
        raise DeclaredReferenceFormatError(
            f"Tab in identity of declared reference {record.display_label!r}: {record.identity!r}"
        )
    return f"{record.identity}\t{kind_to_token(record.kind)}\t{record.display_label}"


def parse_declared_reference(line: str, path: Path | str = "<string>", line_number: int = 1) -> DeclaredReference:
    fields = line.split("\t", 2)
    if len(fields) != 3:
        raise DeclaredReferenceParseError(
            path, line_number, f"expected 3 tab-separated fields, found {len(fields)}"
        )
    identity, token, label = fields
    try:
        kind = token_to_kind(token)
    except ValueError as e:
        raise DeclaredReferenceParseError(path, line_number, str(e)) from None
    return DeclaredReference(identity=identity, kind=kind, display_label=label)


def save_declared_references(records: Iterable[DeclaredReference], path: Path) -> bool:
    """Persist *records* in order. Returns False when the file already matched."""
    # Format everything first so a bad record never leaves a half-written file.
    lines = [format_declared_reference(r) for r in records]
    text = "".join(line + "\n" for line in lines)
    written = write_if_changed(Path(path), text)
    logger.debug("Saved %d declared reference(s) to %s (written=%s)", len(lines), path, written)
    return written


def load_declared_references(path: Path) -> list[DeclaredReference]:
    """Load records in declaration order. Any malformed line aborts the whole load."""
    path = Path(path)
    if not path.exists():
        raise InputMissingError("Declared references file", path)

    records: list[DeclaredReference] = []
    for line_number, raw in enumerate(path.read_bytes().split(b"\n"), start=1):
        try:
            line = raw.decode("utf-8").rstrip("\r")
        except UnicodeDecodeError as e:
            raise DeclaredReferenceParseError(path, line_number, f"not valid UTF-8 ({e.reason})") from None
        if not line:
            continue
        records.append(parse_declared_reference(line, path, line_number))

    logger.debug("Loaded %d declared reference(s) from %s", len(records), path)
    return records
