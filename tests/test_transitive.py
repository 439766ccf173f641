"""Tests for the transitive contribution resolver."""

from reftrim.analysis import resolve_transitive_contributions
from reftrim.models import PackageGraph, ResolvedPackage, package_key


def _graph(*packages):
    """Build a PackageGraph directly from ResolvedPackage values."""
    graph = PackageGraph()
    for package in packages:
        graph.packages[package_key(package.id)] = package
        graph.reverse.setdefault(package_key(package.id), set())
    for key, package in graph.packages.items():
        for dep in package.direct_dependencies:
            graph.reverse.setdefault(package_key(dep), set()).add(key)
    return graph


def _pkg(pid, deps=(), modules=(), build=()):
    return ResolvedPackage(
        id=pid,
        version="1.0.0",
        direct_dependencies=frozenset(deps),
        contributed_modules=tuple(modules),
        build_files=tuple(build),
    )


class TestTransitiveContribution:
    def test_dependency_modules_flow_to_dependents(self):
        graph = _graph(_pkg("A", deps=["B"], modules=["a.dll"]), _pkg("B", modules=["b.dll"]))
        result = resolve_transitive_contributions(graph)
        assert set(result.modules_for("A")) == {"a.dll", "b.dll"}
        assert result.modules_for("B") == ["b.dll"]

    def test_own_modules_are_subset(self):
        graph = _graph(
            _pkg("A", deps=["B", "C"], modules=["a.dll"]),
            _pkg("B", deps=["C"], modules=["b.dll", "b2.dll"]),
            _pkg("C", modules=["c.dll"]),
            _pkg("D", deps=["A"], modules=["d.dll"]),
        )
        result = resolve_transitive_contributions(graph)
        for key, package in graph.packages.items():
            assert set(package.contributed_modules) <= set(result.modules_for(key))
        assert set(result.modules_for("D")) == {"a.dll", "b.dll", "b2.dll", "c.dll", "d.dll"}

    def test_diamond_counts_each_module_once(self):
        graph = _graph(
            _pkg("Top", deps=["Left", "Right"]),
            _pkg("Left", deps=["Bottom"]),
            _pkg("Right", deps=["Bottom"]),
            _pkg("Bottom", modules=["bottom.dll"]),
        )
        result = resolve_transitive_contributions(graph)
        assert result.modules_for("Top") == ["bottom.dll"]
        assert result.modules_for("Left") == ["bottom.dll"]
        assert result.modules_for("Right") == ["bottom.dll"]

    def test_shared_module_from_two_packages_listed_once(self):
        graph = _graph(
            _pkg("Top", deps=["X", "Y"]),
            _pkg("X", modules=["shared.dll"]),
            _pkg("Y", modules=["shared.dll"]),
        )
        result = resolve_transitive_contributions(graph)
        assert result.modules_for("Top") == ["shared.dll"]

    def test_cycle_terminates(self):
        graph = _graph(
            _pkg("A", deps=["B"], modules=["a.dll"]),
            _pkg("B", deps=["A"], modules=["b.dll"]),
        )
        result = resolve_transitive_contributions(graph)
        assert set(result.modules_for("A")) == {"a.dll", "b.dll"}
        assert set(result.modules_for("B")) == {"a.dll", "b.dll"}

    def test_sparse_result(self):
        graph = _graph(
            _pkg("Analyzer"),
            _pkg("Meta", deps=["Analyzer"]),
            _pkg("Lib", modules=["lib.dll"]),
        )
        result = resolve_transitive_contributions(graph)
        assert "Analyzer" not in result
        assert "Meta" not in result
        assert result.modules_for("Analyzer") == []
        assert "Lib" in result

    def test_metapackage_gets_dependency_modules(self):
        graph = _graph(
            _pkg("Meta", deps=["Impl"]),
            _pkg("Impl", modules=["impl.dll"]),
        )
        result = resolve_transitive_contributions(graph)
        assert result.modules_for("Meta") == ["impl.dll"]

    def test_build_files_propagate(self):
        graph = _graph(
            _pkg("App.Sdk", deps=["Tasks"], modules=["sdk.dll"]),
            _pkg("Tasks", build=["build/Tasks.targets"]),
        )
        result = resolve_transitive_contributions(graph)
        assert result.build_files_for("App.Sdk") == ["build/Tasks.targets"]
        assert result.build_files_for("Tasks") == ["build/Tasks.targets"]
        assert result.modules_for("Tasks") == []

    def test_lookup_is_case_insensitive(self):
        graph = _graph(_pkg("Newtonsoft.Json", modules=["nj.dll"]))
        result = resolve_transitive_contributions(graph)
        assert result.modules_for("NEWTONSOFT.JSON") == ["nj.dll"]
