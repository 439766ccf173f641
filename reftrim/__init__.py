"""reftrim: find declared references (direct, project, package) a module does not use."""

__version__ = "0.1.0"
