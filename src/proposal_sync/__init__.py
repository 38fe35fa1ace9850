"""Consolidate proposal conformance test suites into one output tree."""

__version__ = "1.0.0"
