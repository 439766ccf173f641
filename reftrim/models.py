"""Data models for the reference trimming engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path


class ReferenceKind(enum.Enum):
    DIRECT = "direct"
    MODULE_REF = "module_ref"
    PACKAGE_REF = "package_ref"


class Classification(enum.Enum):
    USED = "used"
    REMOVABLE = "removable"
    REMOVABLE_WITH_CAVEAT = "removable_with_caveat"

    @property
    def is_removable(self) -> bool:
        return self is not Classification.USED


def normalize_identity(identity: str) -> str:
    """Key used when comparing module identities (paths compare case-insensitively)."""
    return identity.casefold()


def package_key(package_id: str) -> str:
    return package_id.casefold()


@dataclass(frozen=True)
class DeclaredReference:
    """One dependency a module's descriptor explicitly lists."""
    identity: str  # resolved module path, "" when it could not be resolved
    kind: ReferenceKind
    display_label: str  # original include spec or package id

    @property
    def is_resolved(self) -> bool:
        return bool(self.identity)


@dataclass(frozen=True)
class ResolvedPackage:
    """A package entry from the lock manifest's selected target."""
    id: str
    version: str
    direct_dependencies: frozenset[str] = frozenset()
    contributed_modules: tuple[str, ...] = ()
    build_files: tuple[str, ...] = ()


@dataclass
class PackageGraph:
    packages: dict[str, ResolvedPackage] = field(default_factory=dict)  # key -> package
    reverse: dict[str, set[str]] = field(default_factory=dict)  # key -> {dependent keys}

    def get(self, package_id: str) -> ResolvedPackage | None:
        return self.packages.get(package_key(package_id))

    def dependents(self, package_id: str) -> set[str]:
        return self.reverse.get(package_key(package_id), set())

    def __contains__(self, package_id: str) -> bool:
        return package_key(package_id) in self.packages

    def __len__(self) -> int:
        return len(self.packages)


@dataclass
class TransitiveContribution:
    """Modules (and build files) that become reachable through each package.

    Sparse: packages that contribute nothing are absent.
    """
    modules: dict[str, list[str]] = field(default_factory=dict)
    build_files: dict[str, list[str]] = field(default_factory=dict)

    def modules_for(self, package_id: str) -> list[str]:
        return self.modules.get(package_key(package_id), [])

    def build_files_for(self, package_id: str) -> list[str]:
        return self.build_files.get(package_key(package_id), [])

    def __contains__(self, package_id: str) -> bool:
        key = package_key(package_id)
        return key in self.modules or key in self.build_files


@dataclass(frozen=True)
class TargetSelector:
    """Framework (and optional runtime identifier) selecting a lock manifest target."""
    framework: str
    runtime_identifier: str | None = None

    @property
    def target_key(self) -> str:
        if self.runtime_identifier:
            return f"{self.framework}/{self.runtime_identifier}"
        return self.framework


@dataclass
class ReferenceClassification:
    """Classifier verdict for a declared reference or a package group."""
    reference: DeclaredReference  # first declared record of the group
    classification: Classification
    own_used: list[str] = field(default_factory=list)
    transitive_used: list[str] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.reference.display_label

    @property
    def kind(self) -> ReferenceKind:
        return self.reference.kind


@dataclass
class AnalysisRequest:
    """Inputs for analyzing one compiled module."""
    module: str
    declared_references_path: Path
    used_modules: frozenset[str] | None = None
    used_modules_path: Path | None = None
    assets_path: Path | None = None
    target: TargetSelector | None = None
    offered_modules: frozenset[str] = frozenset()  # every reference handed to the compiler
    compiler_failed: bool = False
    doc_generation_enabled: bool = True
