"""Tests for collecting declared references from project items."""

import json
import os

from reftrim.collector import (
    CollectionInputs,
    ReferenceItem,
    collect_declared_references,
)
from reftrim.models import ReferenceKind, TransitiveContribution


def _contributions(modules=None, build_files=None):
    return TransitiveContribution(modules=modules or {}, build_files=build_files or {})


class TestDirectReferences:
    def test_hint_path_resolution(self, tmp_path):
        dll = tmp_path / "lib" / "Unity.dll"
        dll.parent.mkdir()
        dll.write_bytes(b"MZ")
        inputs = CollectionInputs(references=[ReferenceItem("Unity", {"HintPath": str(dll)})])
        records = collect_declared_references(inputs)
        assert len(records) == 1
        assert records[0].identity == os.path.abspath(dll)
        assert records[0].kind is ReferenceKind.DIRECT
        assert records[0].display_label == "Unity"

    def test_spec_is_existing_file(self, tmp_path):
        dll = tmp_path / "Direct.dll"
        dll.write_bytes(b"MZ")
        inputs = CollectionInputs(references=[ReferenceItem(str(dll))])
        assert collect_declared_references(inputs)[0].identity == os.path.abspath(dll)

    def test_resolved_reference_lookup(self):
        inputs = CollectionInputs(
            references=[ReferenceItem("System.Xml")],
            resolved_references=[
                ReferenceItem("/ref/System.Xml.dll", {"OriginalItemSpec": "system.xml"}),
            ],
        )
        assert collect_declared_references(inputs)[0].identity == "/ref/System.Xml.dll"

    def test_unresolved_reference_kept_without_identity(self):
        inputs = CollectionInputs(references=[ReferenceItem("Nowhere", {"HintPath": "/missing/Nowhere.dll"})])
        records = collect_declared_references(inputs)
        assert len(records) == 1
        assert not records[0].is_resolved

    def test_skips(self, tmp_path):
        inputs = CollectionInputs(
            references=[
                ReferenceItem("System.Runtime", {"IsImplicitlyDefined": "True"}),
                ReferenceItem("mscorlib"),
                ReferenceItem("FromPackage", {"NuGetPackageId": "Some.Package"}),
                ReferenceItem("Quiet", {"NoWarn": "CS0618;RT0001"}),
                ReferenceItem("Pinned", {"TreatAsUsed": "true"}),
            ],
            framework_assemblies={"MSCORLIB"},
        )
        assert collect_declared_references(inputs) == []

    def test_reference_under_package_root_skipped(self, tmp_path):
        root = tmp_path / "packages"
        dll = root / "pkg" / "1.0.0" / "lib" / "Pkg.dll"
        dll.parent.mkdir(parents=True)
        dll.write_bytes(b"MZ")
        inputs = CollectionInputs(
            references=[ReferenceItem("Pkg", {"HintPath": str(dll)})],
            package_root=str(root),
        )
        assert collect_declared_references(inputs) == []


class TestProjectReferences:
    def test_label_is_original_spec(self, tmp_path):
        output = tmp_path / "bin" / "Dependency.dll"
        inputs = CollectionInputs(project_references=[
            ReferenceItem(str(output), {"OriginalProjectReferenceItemSpec": "../Dependency/Dependency.csproj"}),
        ])
        record = collect_declared_references(inputs)[0]
        assert record.kind is ReferenceKind.MODULE_REF
        assert record.identity == os.path.abspath(output)
        assert record.display_label == "../Dependency/Dependency.csproj"

    def test_transitive_and_suppressed_skipped(self, tmp_path):
        inputs = CollectionInputs(project_references=[
            ReferenceItem(str(tmp_path / "T.dll"), {"NuGetPackageId": "Transitive"}),
            ReferenceItem(str(tmp_path / "S.dll"), {"NoWarn": "RT0002"}),
        ])
        assert collect_declared_references(inputs) == []


class TestPackageReferences:
    def test_one_record_per_transitive_module(self):
        contributions = _contributions({"a": ["/p/a.dll", "/p/b.dll"]})
        inputs = CollectionInputs(package_references=[ReferenceItem("A")])
        records = collect_declared_references(inputs, contributions)
        assert [(r.identity, r.display_label) for r in records] == [("/p/a.dll", "A"), ("/p/b.dll", "A")]
        assert all(r.kind is ReferenceKind.PACKAGE_REF for r in records)

    def test_package_without_modules_skipped(self):
        inputs = CollectionInputs(package_references=[ReferenceItem("Analyzers")])
        assert collect_declared_references(inputs, _contributions()) == []

    def test_package_with_build_files_skipped(self):
        contributions = _contributions({"tool": ["/p/t.dll"]}, {"tool": ["/p/build/t.targets"]})
        inputs = CollectionInputs(package_references=[ReferenceItem("Tool")])
        assert collect_declared_references(inputs, contributions) == []

    def test_suppressed_package_skipped(self):
        contributions = _contributions({"a": ["/p/a.dll"]})
        inputs = CollectionInputs(package_references=[ReferenceItem("A", {"NoWarn": "rt0003"})])
        assert collect_declared_references(inputs, contributions) == []


class TestInputsFile:
    def test_load_from_json(self, tmp_path):
        path = tmp_path / "items.json"
        path.write_text(json.dumps({
            "references": [{"spec": "X", "metadata": {"HintPath": "/x.dll"}}],
            "project_references": [{"spec": "/out/P.dll"}],
            "framework_assemblies": ["mscorlib"],
            "package_root": "/packages",
        }))
        inputs = CollectionInputs.load(path)
        assert inputs.references[0].get("HintPath") == "/x.dll"
        assert inputs.project_references[0].metadata == {}
        assert inputs.framework_assemblies == {"mscorlib"}
        assert inputs.package_root == "/packages"
        assert inputs.package_references == []
