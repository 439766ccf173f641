"""Lock manifest parsing and package graph construction."""

from reftrim.lockfile.graph_builder import (
    PackageGraphBuilder,
    build_package_graph,
    module_path_identity,
    verify_graph,
)
from reftrim.lockfile.schema import LockManifest, load_lock_manifest, parse_lock_manifest

__all__ = [
    "LockManifest",
    "PackageGraphBuilder",
    "build_package_graph",
    "load_lock_manifest",
    "module_path_identity",
    "parse_lock_manifest",
    "verify_graph",
]
