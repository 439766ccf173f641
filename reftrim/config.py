"""Configuration for reference trimming, persisted as YAML."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from reftrim.diagnostics import DiagnosticCategory, build_suppression_predicate
from reftrim.diagnostics.emitter import SuppressionPredicate

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "reftrim.yaml"


@dataclass
class TrimmerConfig:
    """Settings shared by every module analyzed in one run."""

    # Master switch; when off nothing is emitted, the RT0000 doc-generation warning included
    enable_diagnostics: bool = True

    # Write used/unused reference dump files next to the declared references file
    dump_reference_info: bool = False

    # Packages whose build files should not exclude them from classification
    ignore_package_build_files: list[str] = field(default_factory=list)

    # Module identities or labels provided by the platform; never flagged
    implicit_references: list[str] = field(default_factory=list)

    # label -> category ids to suppress, "*" applies to every reference
    suppressions: dict[str, list[str]] = field(default_factory=dict)

    # Labels that are always considered used
    treat_as_used: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrimmerConfig:
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        unknown = sorted(set(data) - valid_fields)
        if unknown:
            logger.warning("Ignoring unknown config key(s): %s", ", ".join(unknown))
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        config = cls(**filtered)
        config.validate()
        return config

    @classmethod
    def load(cls, path: Path) -> TrimmerConfig:
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        logger.debug("Loaded config from %s", path)
        return cls.from_dict(data)

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=True)

    def validate(self) -> None:
        """Fail early on suppression entries naming unknown categories."""
        for label, categories in self.suppressions.items():
            for category_id in categories:
                try:
                    DiagnosticCategory.from_id(category_id)
                except ValueError:
                    raise ValueError(f"Suppression for {label!r} names unknown category {category_id!r}") from None

    def suppression_predicate(self) -> SuppressionPredicate:
        return build_suppression_predicate(self.suppressions, self.treat_as_used)


def load_config(path: Path | None = None) -> TrimmerConfig:
    """Load *path*, or ``reftrim.yaml`` in the working directory if present, else defaults."""
    if path is None:
        default = Path.cwd() / DEFAULT_CONFIG_FILE
        if not default.exists():
            return TrimmerConfig()
        path = default
    return TrimmerConfig.load(path)
