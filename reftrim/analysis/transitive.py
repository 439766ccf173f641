"""Transitive contribution resolver: propagate each package's modules up to its dependents."""

from __future__ import annotations

import logging
from collections import deque

from reftrim.models import PackageGraph, TransitiveContribution

logger = logging.getLogger(__name__)


def resolve_transitive_contributions(graph: PackageGraph) -> TransitiveContribution:
    """For each package, collect its own modules plus those of everything it depends on.

    Implemented as one breadth-first walk per contributing package over the
    reverse index, so every dependent (direct or indirect) receives the
    package's modules exactly once, even across diamonds.
    """
    result = TransitiveContribution()

    for source_key, package in graph.packages.items():
        modules = package.contributed_modules
        build_files = package.build_files
        if not modules and not build_files:
            continue

        visited = {source_key}
        queue = deque([source_key])
        while queue:
            current = queue.popleft()
            if modules:
                _union_into(result.modules, current, modules)
            if build_files:
                _union_into(result.build_files, current, build_files)

            for dependent in sorted(graph.reverse.get(current, ())):
                if dependent not in visited:
                    visited.add(dependent)
                    queue.append(dependent)

    logger.debug(
        "Resolved transitive contributions for %d of %d package(s)",
        len(result.modules), len(graph.packages),
    )
    return result


def _union_into(target: dict[str, list[str]], key: str, items: tuple[str, ...]) -> None:
    existing = target.setdefault(key, [])
    seen = set(existing)
    for item in items:
        if item not in seen:
            seen.add(item)
            existing.append(item)
