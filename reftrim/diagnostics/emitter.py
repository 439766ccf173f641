"""Diagnostic emitter: classifications -> ordered, deterministic warnings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from reftrim.diagnostics.categories import (
    PACKAGE_CAVEAT_QUALIFIER,
    DiagnosticCategory,
    category_for_kind,
)
from reftrim.models import (
    Classification,
    DeclaredReference,
    ReferenceClassification,
    ReferenceKind,
)

logger = logging.getLogger(__name__)

SuppressionPredicate = Callable[[DeclaredReference, DiagnosticCategory], bool]


@dataclass(frozen=True)
class Diagnostic:
    category: DiagnosticCategory
    message: str
    label: str = ""
    classification: Classification | None = None
    severity: str = "warning"

    @property
    def id(self) -> str:
        return self.category.id

    def format(self) -> str:
        return f"{self.category.id}: {self.message}"

    def to_dict(self) -> dict:
        return {
            "id": self.category.id,
            "severity": self.severity,
            "label": self.label,
            "classification": self.classification.value if self.classification else None,
            "message": self.message,
        }


def diagnostic_for(verdict: ReferenceClassification) -> Diagnostic | None:
    """Build the diagnostic for a single verdict, or None when the reference is used."""
    if not verdict.classification.is_removable:
        return None

    category = category_for_kind(verdict.kind)
    if verdict.kind is ReferenceKind.PACKAGE_REF:
        qualifier = (
            PACKAGE_CAVEAT_QUALIFIER
            if verdict.classification is Classification.REMOVABLE_WITH_CAVEAT
            else ""
        )
        message = category.format_message(verdict.label, qualifier)
    else:
        message = category.format_message(verdict.label)

    return Diagnostic(
        category=category,
        message=message,
        label=verdict.label,
        classification=verdict.classification,
    )


def emit_diagnostics(
    classifications: list[ReferenceClassification],
    ignore: SuppressionPredicate | None = None,
    doc_generation_enabled: bool = True,
) -> list[Diagnostic]:
    """One diagnostic per removable verdict, in the order the verdicts were declared."""
    diagnostics: list[Diagnostic] = []

    if not doc_generation_enabled:
        category = DiagnosticCategory.DOC_GENERATION
        diagnostics.append(Diagnostic(category=category, message=category.format_message()))

    suppressed = 0
    for verdict in classifications:
        diagnostic = diagnostic_for(verdict)
        if diagnostic is None:
            continue
        if ignore is not None and ignore(verdict.reference, diagnostic.category):
            suppressed += 1
            continue
        diagnostics.append(diagnostic)

    if suppressed:
        logger.debug("Suppressed %d diagnostic(s)", suppressed)
    return diagnostics


def unexpected_error_diagnostic(error: BaseException) -> Diagnostic:
    category = DiagnosticCategory.UNEXPECTED_ERROR
    cause = f"{type(error).__name__}: {error}"
    return Diagnostic(category=category, message=category.format_message(cause))


def format_diagnostics(diagnostics: list[Diagnostic]) -> str:
    return "\n".join(d.format() for d in diagnostics)
