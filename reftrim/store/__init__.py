"""Persistence layer: declared references, used-module reports, dump files."""

from reftrim.store.declared import (
    DECLARED_REFERENCES_FILE_NAME,
    load_declared_references,
    save_declared_references,
)
from reftrim.store.dump import dump_reference_info
from reftrim.store.files import write_if_changed
from reftrim.store.used_report import load_used_modules

__all__ = [
    "DECLARED_REFERENCES_FILE_NAME",
    "dump_reference_info",
    "load_declared_references",
    "load_used_modules",
    "save_declared_references",
    "write_if_changed",
]
