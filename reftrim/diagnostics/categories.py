"""Stable diagnostic categories exposed to build hosts."""

from __future__ import annotations

import enum

from reftrim.models import ReferenceKind

PACKAGE_CAVEAT_QUALIFIER = " (though packages it depends on are used; reference them directly)"


class DiagnosticCategory(enum.Enum):
    DOC_GENERATION = "RT0000"
    REFERENCE_REMOVABLE = "RT0001"
    PROJECT_REFERENCE_REMOVABLE = "RT0002"
    PACKAGE_REFERENCE_REMOVABLE = "RT0003"
    UNEXPECTED_ERROR = "RT9999"

    @property
    def id(self) -> str:
        return self.value

    @property
    def title(self) -> str:
        return _TITLES[self]

    @property
    def template(self) -> str:
        return _TEMPLATES[self]

    def format_message(self, *args: str) -> str:
        return self.template.format(*args)

    @classmethod
    def from_id(cls, category_id: str) -> DiagnosticCategory:
        wanted = category_id.strip().upper()
        for category in cls:
            if category.value == wanted:
                return category
        raise ValueError(f"Unknown diagnostic category {category_id!r}")


_TITLES = {
    DiagnosticCategory.DOC_GENERATION: "Enable documentation generation for accuracy of used references detection",
    DiagnosticCategory.REFERENCE_REMOVABLE: "Unnecessary reference",
    DiagnosticCategory.PROJECT_REFERENCE_REMOVABLE: "Unnecessary project reference",
    DiagnosticCategory.PACKAGE_REFERENCE_REMOVABLE: "Unnecessary package reference",
    DiagnosticCategory.UNEXPECTED_ERROR: "Unexpected error",
}

_TEMPLATES = {
    DiagnosticCategory.DOC_GENERATION: (
        "Enable documentation generation (GenerateDocumentationFile) "
        "for accuracy of used references detection"
    ),
    DiagnosticCategory.REFERENCE_REMOVABLE: "Reference {0} can be removed",
    DiagnosticCategory.PROJECT_REFERENCE_REMOVABLE: "ProjectReference {0} can be removed",
    DiagnosticCategory.PACKAGE_REFERENCE_REMOVABLE: "PackageReference {0} can be removed{1}",
    DiagnosticCategory.UNEXPECTED_ERROR: "ReferenceTrimmer encountered an unexpected error: {0}",
}

_KIND_CATEGORIES = {
    ReferenceKind.DIRECT: DiagnosticCategory.REFERENCE_REMOVABLE,
    ReferenceKind.MODULE_REF: DiagnosticCategory.PROJECT_REFERENCE_REMOVABLE,
    ReferenceKind.PACKAGE_REF: DiagnosticCategory.PACKAGE_REFERENCE_REMOVABLE,
}


def category_for_kind(kind: ReferenceKind) -> DiagnosticCategory:
    return _KIND_CATEGORIES[kind]
