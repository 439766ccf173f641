"""Exception hierarchy for reftrim."""

from __future__ import annotations

from pathlib import Path


class ReftrimError(Exception):
    """Base class for every error raised by reftrim."""


class InputMissingError(ReftrimError):
    """A required input (lock manifest, used-module report, declared file) does not exist.

    Recoverable by the caller, e.g. by running a restore or a build first.
    """

    def __init__(self, what: str, path: Path | str | None = None):
        self.what = what
        self.path = Path(path) if path is not None else None
        msg = f"{what} not found" if path is None else f"{what} not found: {path}"
        super().__init__(msg)


class InputMalformedError(ReftrimError):
    """An input exists but cannot be trusted; analysis of the module is aborted."""


class DeclaredReferenceParseError(InputMalformedError):
    def __init__(self, path: Path | str, line_number: int, reason: str):
        self.path = Path(path)
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"{path}:{line_number}: {reason}")


class DeclaredReferenceFormatError(InputMalformedError):
    """A record cannot be written without corrupting the delimited format."""


class LockManifestError(InputMalformedError):
    pass


class TargetNotFoundError(LockManifestError):
    def __init__(self, target: str, available: list[str]):
        self.target = target
        self.available = available
        listed = ", ".join(available) if available else "none"
        super().__init__(f"Target {target!r} not found in lock manifest (available: {listed})")


class PackageNotFoundError(LockManifestError):
    """A package's directory is missing from every package folder (stale manifest)."""

    def __init__(self, package_id: str, version: str, folders: list[str]):
        self.package_id = package_id
        self.version = version
        self.folders = folders
        super().__init__(
            f"Package {package_id} {version} could not be found in any package folder "
            f"({'; '.join(folders) or 'no package folders'})"
        )


class UsedModuleReportError(InputMalformedError):
    """The compiler's used-module report exists but cannot be read."""


class ModuleMetadataError(InputMalformedError):
    """A module's metadata could not be read to determine its identity."""


class InvariantViolationError(ReftrimError):
    """Internal consistency check failed (e.g. the reverse index is not a transpose)."""
