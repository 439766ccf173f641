"""Usage classifier: decide which declared references can be removed."""

from __future__ import annotations

import logging
from typing import Iterable

from reftrim.models import (
    Classification,
    DeclaredReference,
    PackageGraph,
    ReferenceClassification,
    ReferenceKind,
    TransitiveContribution,
    normalize_identity,
    package_key,
)

logger = logging.getLogger(__name__)


class UsageClassifier:
    """Classify declared references against the compiler's used-module set.

    Direct and module references are judged one by one. Package references are
    grouped by display label, since a package contributes one record per
    module, and judged as a unit using the package graph when available.
    """

    def __init__(
        self,
        graph: PackageGraph | None = None,
        contributions: TransitiveContribution | None = None,
        implicit_references: Iterable[str] = (),
    ):
        self.graph = graph
        self.contributions = contributions
        self.implicit_references = {normalize_identity(r) for r in implicit_references}

    def classify(
        self,
        references: list[DeclaredReference],
        used_modules: Iterable[str],
    ) -> list[ReferenceClassification]:
        used_keys = {normalize_identity(m) for m in used_modules}
        results: list[ReferenceClassification] = []

        # Package groups keep the position of their first record.
        groups: dict[str, list[DeclaredReference]] = {}
        order: list[tuple[str, DeclaredReference | str]] = []
        for ref in references:
            if ref.kind is ReferenceKind.PACKAGE_REF:
                key = package_key(ref.display_label)
                if key not in groups:
                    groups[key] = []
                    order.append(("package", key))
                groups[key].append(ref)
            else:
                order.append(("single", ref))

        for entry_type, value in order:
            if entry_type == "package":
                verdict = self._classify_package(groups[value], used_keys)
            else:
                verdict = self._classify_single(value, used_keys)
            if verdict is not None:
                results.append(verdict)

        return results

    def _classify_single(
        self,
        ref: DeclaredReference,
        used_keys: set[str],
    ) -> ReferenceClassification | None:
        if self._is_implicit(ref):
            logger.debug("Skipping '%s' because it is provided by the platform", ref.display_label)
            return None

        if not ref.is_resolved:
            logger.debug("Treating '%s' as used because its module could not be resolved", ref.display_label)
            return ReferenceClassification(ref, Classification.USED)

        if normalize_identity(ref.identity) in used_keys:
            return ReferenceClassification(ref, Classification.USED, own_used=[ref.identity])
        return ReferenceClassification(ref, Classification.REMOVABLE)

    def _classify_package(
        self,
        records: list[DeclaredReference],
        used_keys: set[str],
    ) -> ReferenceClassification | None:
        first = records[0]
        label = first.display_label
        package = self.graph.get(label) if self.graph is not None else None

        if package is not None:
            own = list(package.contributed_modules)
            if self.contributions is not None:
                transitive = self.contributions.modules_for(label)
                build_files = self.contributions.build_files_for(label)
            else:
                transitive = own
                build_files = list(package.build_files)
        else:
            if any(not r.is_resolved for r in records):
                logger.debug("Treating package '%s' as used because a module could not be resolved", label)
                return ReferenceClassification(first, Classification.USED)
            own = transitive = [r.identity for r in records]
            build_files = []

        if not transitive:
            logger.debug(
                "Skipping package '%s' because it has no compile-time modules "
                "(likely an analyzer, tool, or content-only package)", label,
            )
            return None

        if build_files:
            logger.debug("Skipping package '%s' because it has %d build file(s)", label, len(build_files))
            return None

        own_used = [m for m in own if normalize_identity(m) in used_keys]
        transitive_used = [m for m in transitive if normalize_identity(m) in used_keys]

        if not transitive_used:
            classification = Classification.REMOVABLE
        elif not own_used:
            classification = Classification.REMOVABLE_WITH_CAVEAT
        else:
            classification = Classification.USED

        return ReferenceClassification(first, classification, own_used, transitive_used)

    def _is_implicit(self, ref: DeclaredReference) -> bool:
        if not self.implicit_references:
            return False
        return (
            normalize_identity(ref.display_label) in self.implicit_references
            or (ref.is_resolved and normalize_identity(ref.identity) in self.implicit_references)
        )


def classify_references(
    references: list[DeclaredReference],
    used_modules: Iterable[str],
    graph: PackageGraph | None = None,
    contributions: TransitiveContribution | None = None,
    implicit_references: Iterable[str] = (),
) -> list[ReferenceClassification]:
    return UsageClassifier(graph, contributions, implicit_references).classify(references, used_modules)
