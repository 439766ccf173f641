"""Collect declared references from evaluated project items.

The project evaluator hands over raw items (include spec plus metadata);
this module filters them and resolves each to a module identity, producing
the records the declared reference store persists.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from reftrim.diagnostics import DiagnosticCategory, no_warn_contains
from reftrim.diagnostics.suppression import is_truthy
from reftrim.models import DeclaredReference, ReferenceKind, TransitiveContribution

logger = logging.getLogger(__name__)

NO_WARN = "NoWarn"
TREAT_AS_USED = "TreatAsUsed"


@dataclass
class ReferenceItem:
    """A project item: include spec plus its metadata."""
    spec: str
    metadata: dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> str:
        return self.metadata.get(name) or ""


@dataclass
class CollectionInputs:
    references: list[ReferenceItem] = field(default_factory=list)
    resolved_references: list[ReferenceItem] = field(default_factory=list)
    project_references: list[ReferenceItem] = field(default_factory=list)
    package_references: list[ReferenceItem] = field(default_factory=list)
    framework_assemblies: set[str] = field(default_factory=set)
    package_root: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CollectionInputs:
        def items(key: str) -> list[ReferenceItem]:
            return [
                ReferenceItem(spec=entry["spec"], metadata=dict(entry.get("metadata") or {}))
                for entry in data.get(key) or []
            ]

        return cls(
            references=items("references"),
            resolved_references=items("resolved_references"),
            project_references=items("project_references"),
            package_references=items("package_references"),
            framework_assemblies=set(data.get("framework_assemblies") or []),
            package_root=data.get("package_root"),
        )

    @classmethod
    def load(cls, path: Path) -> CollectionInputs:
        return cls.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))


def is_suppressed(item: ReferenceItem, category: DiagnosticCategory) -> bool:
    return no_warn_contains(item.get(NO_WARN), category.id) or is_truthy(item.get(TREAT_AS_USED))


def collect_declared_references(
    inputs: CollectionInputs,
    contributions: TransitiveContribution | None = None,
) -> list[DeclaredReference]:
    declared: list[DeclaredReference] = []

    if inputs.references:
        declared.extend(_collect_direct(inputs))
    else:
        logger.debug("No References to process")

    if inputs.project_references:
        declared.extend(_collect_project_references(inputs.project_references))
    else:
        logger.debug("No ProjectReferences to process")

    if inputs.package_references:
        declared.extend(_collect_package_references(inputs.package_references, contributions))
    else:
        logger.debug("No PackageReferences to process")

    logger.info("Collected %d declared reference(s)", len(declared))
    return declared


def _collect_direct(inputs: CollectionInputs) -> list[DeclaredReference]:
    declared: list[DeclaredReference] = []
    framework = {name.casefold() for name in inputs.framework_assemblies}
    package_root = None
    if inputs.package_root:
        package_root = os.path.join(os.path.abspath(inputs.package_root), "").casefold()

    for item in inputs.references:
        spec = item.spec
        if is_truthy(item.get("IsImplicitlyDefined")):
            logger.debug("Skipping Reference '%s' because it is implicitly defined", spec)
            continue

        # Conflict resolution may swap a package assembly for a framework one.
        if spec.casefold() in framework:
            logger.debug("Skipping Reference '%s' because it is a target framework assembly", spec)
            continue

        if item.get("NuGetPackageId"):
            continue

        if is_suppressed(item, DiagnosticCategory.REFERENCE_REMOVABLE):
            logger.debug("Skipping Reference '%s' because it is suppressed", spec)
            continue

        path = _resolve_reference_path(item, inputs.resolved_references)

        if path is not None and package_root is not None:
            if os.path.abspath(path).casefold().startswith(package_root):
                logger.debug(
                    "Skipping Reference '%s' because '%s' is under the package root "
                    "(likely added by a package's build files)", spec, path,
                )
                continue

        if path is None:
            logger.debug("Reference '%s' could not be resolved to a file", spec)
        declared.append(DeclaredReference(path or "", ReferenceKind.DIRECT, spec))

    return declared


def _resolve_reference_path(item: ReferenceItem, resolved: list[ReferenceItem]) -> str | None:
    hint_path = item.get("HintPath")
    if hint_path and os.path.isfile(hint_path):
        return os.path.abspath(hint_path)
    if os.path.isfile(item.spec):
        return os.path.abspath(item.spec)

    wanted = item.spec.casefold()
    matches = [r for r in resolved if r.get("OriginalItemSpec").casefold() == wanted]
    if len(matches) == 1:
        return matches[0].spec
    if len(matches) > 1:
        logger.debug("Reference '%s' resolved ambiguously (%d matches)", item.spec, len(matches))
    return None


def _collect_project_references(items: Iterable[ReferenceItem]) -> list[DeclaredReference]:
    declared: list[DeclaredReference] = []
    for item in items:
        if is_suppressed(item, DiagnosticCategory.PROJECT_REFERENCE_REMOVABLE):
            logger.debug("Skipping ProjectReference '%s' because it is suppressed", item.spec)
            continue

        # Restore marks transitive project references with a package id.
        if item.get("NuGetPackageId"):
            continue

        label = item.get("OriginalProjectReferenceItemSpec") or item.spec
        declared.append(DeclaredReference(os.path.abspath(item.spec), ReferenceKind.MODULE_REF, label))
    return declared


def _collect_package_references(
    items: Iterable[ReferenceItem],
    contributions: TransitiveContribution | None,
) -> list[DeclaredReference]:
    declared: list[DeclaredReference] = []
    contributions = contributions or TransitiveContribution()

    for item in items:
        package_id = item.spec
        if is_suppressed(item, DiagnosticCategory.PACKAGE_REFERENCE_REMOVABLE):
            logger.debug("Skipping PackageReference '%s' because it is suppressed", package_id)
            continue

        if package_id not in contributions:
            logger.debug(
                "Skipping PackageReference '%s' because it has no compile-time modules "
                "(likely an analyzer, tool, or content-only package)", package_id,
            )
            continue

        build_files = contributions.build_files_for(package_id)
        if build_files:
            logger.debug(
                "Skipping PackageReference '%s' because it has %d build file(s)", package_id, len(build_files),
            )
            continue

        for module in contributions.modules_for(package_id):
            declared.append(DeclaredReference(module, ReferenceKind.PACKAGE_REF, package_id))
    return declared
