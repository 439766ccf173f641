"""Package dependency graph builder: lock manifest target -> PackageGraph with reverse index."""

from __future__ import annotations

import logging
import os
from typing import Callable, Iterable

from reftrim.errors import InvariantViolationError, PackageNotFoundError, TargetNotFoundError
from reftrim.lockfile.schema import LockManifest, TargetLibrary, is_placeholder
from reftrim.models import PackageGraph, ResolvedPackage, TargetSelector, package_key

logger = logging.getLogger(__name__)

ModuleIdentityResolver = Callable[[str], str]


def module_path_identity(module_path: str) -> str:
    """Default identity: the normalized absolute path, as the compiler reports it."""
    return os.path.normpath(os.path.abspath(module_path))


class PackageGraphBuilder:
    """Build a PackageGraph from one target of a lock manifest."""

    def __init__(
        self,
        ignore_build_files: Iterable[str] = (),
        identify_module: ModuleIdentityResolver = module_path_identity,
    ):
        self.ignore_build_files = {package_key(p) for p in ignore_build_files}
        self.identify_module = identify_module

    def build(self, manifest: LockManifest, selector: TargetSelector) -> PackageGraph:
        target = manifest.find_target(selector.target_key)
        if target is None:
            raise TargetNotFoundError(selector.target_key, sorted(manifest.targets))

        entries = [
            (name, library) for name, library in target.items()
            if library.type.casefold() == "package"
        ]
        logger.debug(
            "Found %d package library(ies) in lock manifest target %s",
            len(entries), selector.target_key,
        )

        graph = PackageGraph()
        folders = manifest.package_folder_paths

        # Step 1: Nodes
        for name, library in entries:
            package_id, _, version = name.partition("/")
            package_dir = self._locate_package(manifest, package_id, version, folders)
            package = ResolvedPackage(
                id=package_id,
                version=version,
                direct_dependencies=frozenset(library.dependencies),
                contributed_modules=self._compile_modules(library, package_dir),
                build_files=self._build_files(package_id, library, package_dir),
            )
            logger.debug(
                "Package '%s' v%s: %d compile-time module(s), %d build file(s)",
                package.id, package.version, len(package.contributed_modules), len(package.build_files),
            )
            graph.packages[package_key(package_id)] = package
            graph.reverse.setdefault(package_key(package_id), set())

        # Step 2: Reverse index (who depends on each package)
        for key, package in graph.packages.items():
            for dependency in package.direct_dependencies:
                graph.reverse.setdefault(package_key(dependency), set()).add(key)

        return graph

    def _locate_package(
        self,
        manifest: LockManifest,
        package_id: str,
        version: str,
        folders: list[str],
    ) -> str:
        library = manifest.find_library(package_id, version)
        relative = library.path if library and library.path else f"{package_id.lower()}/{version.lower()}"
        for folder in folders:
            candidate = os.path.join(folder, relative)
            if os.path.isdir(candidate):
                return candidate
        raise PackageNotFoundError(package_id, version, folders)

    def _compile_modules(self, library: TargetLibrary, package_dir: str) -> tuple[str, ...]:
        modules: list[str] = []
        for asset in library.compile:
            if is_placeholder(asset):
                continue
            identity = self.identify_module(os.path.join(package_dir, asset))
            if identity not in modules:
                modules.append(identity)
        return tuple(modules)

    def _build_files(self, package_id: str, library: TargetLibrary, package_dir: str) -> tuple[str, ...]:
        assets = [a for a in library.build if not is_placeholder(a)]
        if package_key(package_id) in self.ignore_build_files:
            if assets:
                logger.debug(
                    "Package '%s' has %d build file(s) but they are ignored", package_id, len(assets),
                )
            return ()
        return tuple(os.path.normpath(os.path.join(package_dir, a)) for a in assets)


def verify_graph(graph: PackageGraph) -> None:
    """Check that the reverse index is the exact transpose of the dependency edges."""
    expected: dict[str, set[str]] = {key: set() for key in graph.packages}
    for key, package in graph.packages.items():
        for dependency in package.direct_dependencies:
            expected.setdefault(package_key(dependency), set()).add(key)

    actual = {key: set(dependents) for key, dependents in graph.reverse.items()}
    if actual != expected:
        mismatched = sorted(set(actual) ^ set(expected) | {
            k for k in set(actual) & set(expected) if actual[k] != expected[k]
        })
        raise InvariantViolationError(
            f"Reverse dependency index is inconsistent for package(s): {', '.join(mismatched)}"
        )


def build_package_graph(
    manifest: LockManifest,
    selector: TargetSelector,
    ignore_build_files: Iterable[str] = (),
    identify_module: ModuleIdentityResolver = module_path_identity,
) -> PackageGraph:
    return PackageGraphBuilder(ignore_build_files, identify_module).build(manifest, selector)
