"""Application services orchestrating domain and core capabilities."""

from .execution import run_consolidation

__all__ = [
    "run_consolidation",
]
