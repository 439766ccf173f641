"""Diagnostic categories, emission and suppression."""

from reftrim.diagnostics.categories import (
    PACKAGE_CAVEAT_QUALIFIER,
    DiagnosticCategory,
    category_for_kind,
)
from reftrim.diagnostics.emitter import (
    Diagnostic,
    SuppressionPredicate,
    emit_diagnostics,
    format_diagnostics,
    unexpected_error_diagnostic,
)
from reftrim.diagnostics.suppression import build_suppression_predicate, no_warn_contains

__all__ = [
    "PACKAGE_CAVEAT_QUALIFIER",
    "Diagnostic",
    "DiagnosticCategory",
    "SuppressionPredicate",
    "build_suppression_predicate",
    "category_for_kind",
    "emit_diagnostics",
    "format_diagnostics",
    "no_warn_contains",
    "unexpected_error_diagnostic",
]
