"""Mutation graph."""

from .production_graph import ProductionGraph

__all__ = ["ProductionGraph"]
