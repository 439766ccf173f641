"""Shared fixtures: NuGet-style lock manifests under tmp_path."""

import json
import os

import pytest


def _module_path(root, package_id, version, asset):
    return os.path.normpath(os.path.abspath(os.path.join(root, package_id.lower(), version, asset)))


@pytest.fixture
def package_root(tmp_path):
    return tmp_path / "packages"


@pytest.fixture
def module_path(package_root):
    """module_path("A", "lib/net8.0/a.dll") -> identity the graph builder will produce."""
    def _make(package_id, asset, version="1.0.0"):
        return _module_path(package_root, package_id, version, asset)
    return _make


@pytest.fixture
def make_assets(tmp_path, package_root):
    """Write a project.assets.json for the given package specs and return its path.

    Each spec is a dict: id, version, deps, compile, build, type.
    """
    def _make(packages, framework="net8.0", runtime=None, create_dirs=True):
        targets = {}
        libraries = {}
        for spec in packages:
            package_id = spec["id"]
            version = spec.get("version", "1.0.0")
            kind = spec.get("type", "package")
            rel = f"{package_id.lower()}/{version}"
            if create_dirs and kind == "package":
                (package_root / rel).mkdir(parents=True, exist_ok=True)
            targets[f"{package_id}/{version}"] = {
                "type": kind,
                "dependencies": {d: "1.0.0" for d in spec.get("deps", [])},
                "compile": {a: {} for a in spec.get("compile", [])},
                "build": {b: {} for b in spec.get("build", [])},
            }
            libraries[f"{package_id}/{version}"] = {"type": kind, "path": rel}

        target_key = f"{framework}/{runtime}" if runtime else framework
        data = {
            "version": 3,
            "targets": {target_key: targets},
            "libraries": libraries,
            "packageFolders": {str(package_root) + os.sep: {}},
        }
        path = tmp_path / "project.assets.json"
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path
    return _make
