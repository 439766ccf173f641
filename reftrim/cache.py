"""Explicit per-run cache of parsed lock manifests and their derived graphs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from reftrim.analysis.transitive import resolve_transitive_contributions
from reftrim.lockfile.graph_builder import (
    ModuleIdentityResolver,
    PackageGraphBuilder,
    module_path_identity,
)
from reftrim.lockfile.schema import LockManifest, load_lock_manifest
from reftrim.models import PackageGraph, TargetSelector, TransitiveContribution, package_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedTarget:
    graph: PackageGraph
    contributions: TransitiveContribution


class ManifestCache:
    """Caches manifests by (path, mtime) and resolved targets by selector.

    Instances are owned by the caller; nothing here is module-global, so
    independent runs (and tests) never share results.
    """

    def __init__(self):
        # resolved path -> (mtime_ns, manifest)
        self._manifests: dict[str, tuple[int, LockManifest]] = {}
        self._targets: dict[tuple, ResolvedTarget] = {}
        self.hits = 0
        self.misses = 0

    def manifest(self, path: Path) -> LockManifest:
        path = Path(path)
        key = str(path.resolve())
        mtime = path.stat().st_mtime_ns if path.exists() else -1
        cached = self._manifests.get(key)
        if cached is not None:
            if cached[0] == mtime:
                self.hits += 1
                return cached[1]
            logger.debug("Lock manifest %s changed on disk; dropping cached entries", path)
            self._evict(cached[1])
        self.misses += 1
        manifest = load_lock_manifest(path)
        self._manifests[key] = (mtime, manifest)
        return manifest

    def _evict(self, manifest: LockManifest) -> None:
        self._manifests = {k: v for k, v in self._manifests.items() if v[1] is not manifest}
        self._targets = {k: v for k, v in self._targets.items() if k[0] != id(manifest)}

    def resolve(
        self,
        path: Path,
        selector: TargetSelector,
        ignore_build_files: Iterable[str] = (),
        identify_module: ModuleIdentityResolver = module_path_identity,
    ) -> ResolvedTarget:
        manifest = self.manifest(path)
        ignored = tuple(sorted(package_key(p) for p in ignore_build_files))
        key = (id(manifest), selector.target_key.casefold(), ignored, identify_module)
        cached = self._targets.get(key)
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        resolved = resolve_target(manifest, selector, ignored, identify_module)
        self._targets[key] = resolved
        return resolved

    def clear(self) -> None:
        self._manifests.clear()
        self._targets.clear()


def resolve_target(
    manifest: LockManifest,
    selector: TargetSelector,
    ignore_build_files: Iterable[str] = (),
    identify_module: ModuleIdentityResolver = module_path_identity,
) -> ResolvedTarget:
    graph = PackageGraphBuilder(ignore_build_files, identify_module).build(manifest, selector)
    return ResolvedTarget(graph=graph, contributions=resolve_transitive_contributions(graph))
