"""Suppression rules: NoWarn lists and treat-as-used markers."""

from __future__ import annotations

from typing import Iterable, Mapping

from reftrim.diagnostics.categories import DiagnosticCategory
from reftrim.diagnostics.emitter import SuppressionPredicate
from reftrim.models import DeclaredReference


def no_warn_contains(no_warn: str | None, category_id: str) -> bool:
    """True if a ``;``-separated NoWarn list names *category_id* (case-insensitive)."""
    if not no_warn:
        return False
    wanted = category_id.casefold()
    return any(part.strip().casefold() == wanted for part in no_warn.split(";"))


def is_truthy(value: str | bool | None) -> bool:
    if isinstance(value, bool):
        return value
    return value is not None and value.strip().casefold() == "true"


def build_suppression_predicate(
    suppressions: Mapping[str, Iterable[str]] | None = None,
    treat_as_used: Iterable[str] = (),
) -> SuppressionPredicate:
    """Build an ignore predicate from per-label category lists and treat-as-used labels.

    A ``"*"`` label applies its categories to every reference.
    """
    by_label = {
        label.casefold(): {DiagnosticCategory.from_id(c) for c in categories}
        for label, categories in (suppressions or {}).items()
    }
    used_labels = {label.casefold() for label in treat_as_used}
    everywhere = by_label.get("*", set())

    def ignore(reference: DeclaredReference, category: DiagnosticCategory) -> bool:
        label = reference.display_label.casefold()
        if label in used_labels:
            return True
        return category in everywhere or category in by_label.get(label, set())

    return ignore
