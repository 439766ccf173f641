"""Pydantic models for the parts of a NuGet ``project.assets.json`` reftrim reads."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from reftrim.errors import InputMissingError, LockManifestError

logger = logging.getLogger(__name__)

# Asset path NuGet writes when a folder is intentionally empty.
PLACEHOLDER_FILE_NAME = "_._"


class TargetLibrary(BaseModel):
    """One ``targets.<tfm>.<id>/<version>`` entry."""
    model_config = ConfigDict(extra="ignore")

    type: str = "package"
    framework: Optional[str] = None
    dependencies: dict[str, str] = Field(default_factory=dict)
    compile: dict[str, Optional[dict[str, Any]]] = Field(default_factory=dict)
    build: dict[str, Optional[dict[str, Any]]] = Field(default_factory=dict)


class LibraryEntry(BaseModel):
    """One ``libraries.<id>/<version>`` entry."""
    model_config = ConfigDict(extra="ignore")

    type: str = "package"
    path: Optional[str] = None


class LockManifest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    version: int = 3
    targets: dict[str, dict[str, TargetLibrary]] = Field(default_factory=dict)
    libraries: dict[str, LibraryEntry] = Field(default_factory=dict)
    package_folders: dict[str, Any] = Field(default_factory=dict, alias="packageFolders")

    @property
    def package_folder_paths(self) -> list[str]:
        return list(self.package_folders)

    def find_target(self, key: str) -> dict[str, TargetLibrary] | None:
        if key in self.targets:
            return self.targets[key]
        wanted = key.casefold()
        for name, libraries in self.targets.items():
            if name.casefold() == wanted:
                return libraries
        return None

    def find_library(self, package_id: str, version: str) -> LibraryEntry | None:
        key = f"{package_id}/{version}"
        if key in self.libraries:
            return self.libraries[key]
        wanted = key.casefold()
        for name, entry in self.libraries.items():
            if name.casefold() == wanted:
                return entry
        return None


def is_placeholder(asset_path: str) -> bool:
    return asset_path.endswith(PLACEHOLDER_FILE_NAME)


def parse_lock_manifest(data: dict[str, Any] | str) -> LockManifest:
    """Validate manifest content (already-decoded JSON or raw text)."""
    try:
        if isinstance(data, str):
            data = json.loads(data)
        return LockManifest.model_validate(data)
    except json.JSONDecodeError as e:
        raise LockManifestError(f"Lock manifest is not valid JSON: {e}") from e
    except ValidationError as e:
        raise LockManifestError(f"Lock manifest has an unexpected shape: {e}") from e


def load_lock_manifest(path: Path) -> LockManifest:
    path = Path(path)
    if not path.exists():
        raise InputMissingError("Lock manifest", path)
    logger.debug("Loading lock manifest from %s", path)
    try:
        text = path.read_bytes().decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise LockManifestError(f"Lock manifest {path} is not valid UTF-8: {e}") from e
    return parse_lock_manifest(text)
