"""Tests for diagnostic emission and suppression."""

import pytest

from reftrim.diagnostics import (
    DiagnosticCategory,
    build_suppression_predicate,
    emit_diagnostics,
    format_diagnostics,
    no_warn_contains,
    unexpected_error_diagnostic,
)
from reftrim.errors import InvariantViolationError
from reftrim.models import Classification, DeclaredReference, ReferenceClassification, ReferenceKind


def _verdict(label, kind, classification):
    return ReferenceClassification(DeclaredReference(f"/{label}.dll", kind, label), classification)


def _sample():
    return [
        _verdict("Unity", ReferenceKind.DIRECT, Classification.REMOVABLE),
        _verdict("../Dep/Dep.csproj", ReferenceKind.MODULE_REF, Classification.REMOVABLE),
        _verdict("Used.Package", ReferenceKind.PACKAGE_REF, Classification.USED),
        _verdict("Newtonsoft.Json", ReferenceKind.PACKAGE_REF, Classification.REMOVABLE),
        _verdict("Meta.Package", ReferenceKind.PACKAGE_REF, Classification.REMOVABLE_WITH_CAVEAT),
    ]


class TestEmitter:
    def test_golden_output(self):
        text = format_diagnostics(emit_diagnostics(_sample()))
        assert text == (
            "RT0001: Reference Unity can be removed\n"
            "RT0002: ProjectReference ../Dep/Dep.csproj can be removed\n"
            "RT0003: PackageReference Newtonsoft.Json can be removed\n"
            "RT0003: PackageReference Meta.Package can be removed"
            " (though packages it depends on are used; reference them directly)"
        )

    def test_caveat_is_machine_readable(self):
        diagnostics = emit_diagnostics(_sample())
        assert [d.classification for d in diagnostics] == [
            Classification.REMOVABLE,
            Classification.REMOVABLE,
            Classification.REMOVABLE,
            Classification.REMOVABLE_WITH_CAVEAT,
        ]
        assert all(d.severity == "warning" for d in diagnostics)

    def test_deterministic_across_runs(self):
        assert emit_diagnostics(_sample()) == emit_diagnostics(_sample())

    def test_doc_generation_warning_first(self):
        diagnostics = emit_diagnostics(_sample()[:1], doc_generation_enabled=False)
        assert [d.id for d in diagnostics] == ["RT0000", "RT0001"]

    def test_used_produces_nothing(self):
        used = [_verdict("X", ReferenceKind.DIRECT, Classification.USED)]
        assert emit_diagnostics(used) == []

    def test_ignore_predicate(self):
        seen = []

        def ignore(reference, category):
            seen.append((reference.display_label, category))
            return category is DiagnosticCategory.PACKAGE_REFERENCE_REMOVABLE

        diagnostics = emit_diagnostics(_sample(), ignore=ignore)
        assert [d.id for d in diagnostics] == ["RT0001", "RT0002"]
        # Only removable verdicts reach the predicate.
        assert ("Used.Package", DiagnosticCategory.PACKAGE_REFERENCE_REMOVABLE) not in seen

    def test_to_dict(self):
        d = emit_diagnostics(_sample()[-1:])[0].to_dict()
        assert d["id"] == "RT0003"
        assert d["label"] == "Meta.Package"
        assert d["classification"] == "removable_with_caveat"

    def test_unexpected_error(self):
        diagnostic = unexpected_error_diagnostic(InvariantViolationError("reverse index broken"))
        assert diagnostic.id == "RT9999"
        assert diagnostic.severity == "warning"
        assert "InvariantViolationError: reverse index broken" in diagnostic.message


class TestCategories:
    def test_from_id(self):
        assert DiagnosticCategory.from_id("rt0003") is DiagnosticCategory.PACKAGE_REFERENCE_REMOVABLE

    def test_unknown_id(self):
        with pytest.raises(ValueError):
            DiagnosticCategory.from_id("RT0042")

    def test_every_category_has_title_and_template(self):
        for category in DiagnosticCategory:
            assert category.title
            assert category.template


class TestSuppression:
    @pytest.mark.parametrize("no_warn,expected", [
        ("RT0003", True),
        ("CS1591; rt0003 ;NU1701", True),
        ("RT00031", False),
        ("", False),
        (None, False),
    ])
    def test_no_warn_contains(self, no_warn, expected):
        assert no_warn_contains(no_warn, "RT0003") is expected

    def test_predicate_by_label(self):
        ignore = build_suppression_predicate({"Unity": ["RT0001"]})
        diagnostics = emit_diagnostics(_sample(), ignore=ignore)
        assert "Unity" not in [d.label for d in diagnostics]
        assert len(diagnostics) == 3

    def test_predicate_wildcard(self):
        ignore = build_suppression_predicate({"*": ["RT0003"]})
        diagnostics = emit_diagnostics(_sample(), ignore=ignore)
        assert [d.id for d in diagnostics] == ["RT0001", "RT0002"]

    def test_treat_as_used(self):
        ignore = build_suppression_predicate(treat_as_used=["newtonsoft.json"])
        labels = [d.label for d in emit_diagnostics(_sample(), ignore=ignore)]
        assert "Newtonsoft.Json" not in labels
