"""Reference usage analysis: transitive contributions and classification."""

from reftrim.analysis.classifier import UsageClassifier, classify_references
from reftrim.analysis.transitive import resolve_transitive_contributions

__all__ = ["UsageClassifier", "classify_references", "resolve_transitive_contributions"]
