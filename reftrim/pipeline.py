"""Per-module analysis orchestrator: store -> graph -> contributions -> classify -> emit."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from reftrim.analysis.classifier import UsageClassifier
from reftrim.cache import ManifestCache, ResolvedTarget, resolve_target
from reftrim.config import TrimmerConfig
from reftrim.diagnostics import Diagnostic, emit_diagnostics, unexpected_error_diagnostic
from reftrim.errors import InputMalformedError, InputMissingError, ReftrimError
from reftrim.lockfile.graph_builder import ModuleIdentityResolver, module_path_identity, verify_graph
from reftrim.lockfile.schema import load_lock_manifest
from reftrim.models import AnalysisRequest, ReferenceClassification
from reftrim.store import dump_reference_info, load_declared_references, load_used_modules

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


@dataclass
class AnalysisResult:
    module: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    classifications: list[ReferenceClassification] = field(default_factory=list)
    skipped: bool = False
    skip_reason: str | None = None
    error: ReftrimError | None = None
    dump_files: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def input_missing(self) -> bool:
        return isinstance(self.error, InputMissingError)


def analyze_module(
    request: AnalysisRequest,
    config: TrimmerConfig | None = None,
    cache: ManifestCache | None = None,
    identify_module: ModuleIdentityResolver = module_path_identity,
) -> AnalysisResult:
    """Analyze one compiled module.

    Raises InputMissingError / InputMalformedError for inputs that make the
    analysis untrustworthy. Failures inside classification itself are turned
    into an unexpected-error diagnostic instead.
    """
    config = config or TrimmerConfig()
    result = AnalysisResult(module=request.module)

    if request.compiler_failed:
        logger.info("Skipping %s because the compiler reported errors", request.module)
        result.skipped = True
        result.skip_reason = "compiler reported errors"
        return result

    references = load_declared_references(request.declared_references_path)
    used_modules = _used_modules(request)
    resolved = _resolve_packages(request, config, cache, identify_module)

    if config.dump_reference_info:
        result.dump_files = dump_reference_info(
            used_modules, request.offered_modules, Path(request.declared_references_path).parent,
        )

    try:
        if resolved is not None:
            verify_graph(resolved.graph)
        classifier = UsageClassifier(
            graph=resolved.graph if resolved else None,
            contributions=resolved.contributions if resolved else None,
            implicit_references=config.implicit_references,
        )
        result.classifications = classifier.classify(references, used_modules)
    except Exception as e:
        logger.warning("Unexpected error analyzing %s: %s", request.module, e, exc_info=True)
        result.diagnostics = [unexpected_error_diagnostic(e)]
        return result

    if config.enable_diagnostics:
        result.diagnostics = emit_diagnostics(
            result.classifications,
            ignore=config.suppression_predicate(),
            doc_generation_enabled=request.doc_generation_enabled,
        )

    logger.info(
        "%s: %d declared reference(s), %d diagnostic(s)",
        request.module, len(references), len(result.diagnostics),
    )
    return result


def analyze_modules(
    requests: list[AnalysisRequest],
    config: TrimmerConfig | None = None,
    cache: ManifestCache | None = None,
    progress: ProgressCallback | None = None,
    identify_module: ModuleIdentityResolver = module_path_identity,
) -> list[AnalysisResult]:
    """Analyze several modules independently; one module's bad input never stops the rest."""
    results: list[AnalysisResult] = []
    for i, request in enumerate(requests):
        if progress:
            progress("Analyzing", i, len(requests))
        try:
            results.append(analyze_module(request, config, cache, identify_module))
        except (InputMissingError, InputMalformedError) as e:
            logger.error("Analysis of %s failed: %s", request.module, e)
            results.append(AnalysisResult(module=request.module, error=e))

    if progress:
        progress("Analyzing", len(requests), len(requests))
    return results


def _used_modules(request: AnalysisRequest) -> frozenset[str]:
    if request.used_modules is not None:
        return frozenset(request.used_modules)
    if request.used_modules_path is not None:
        return load_used_modules(request.used_modules_path)
    raise InputMissingError("Used module report")


def _resolve_packages(
    request: AnalysisRequest,
    config: TrimmerConfig,
    cache: ManifestCache | None,
    identify_module: ModuleIdentityResolver,
) -> ResolvedTarget | None:
    if request.assets_path is None:
        return None
    if request.target is None:
        raise InputMalformedError(f"No target selector given for lock manifest {request.assets_path}")

    if cache is not None:
        return cache.resolve(
            request.assets_path, request.target, config.ignore_package_build_files, identify_module,
        )
    manifest = load_lock_manifest(request.assets_path)
    return resolve_target(manifest, request.target, config.ignore_package_build_files, identify_module)
