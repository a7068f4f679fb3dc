"""Parsers for mutation database files."""

from .mutation_parser import (
    DEFAULT_MUTATIONS_PATH,
    MutationParser,
    load_default_graph,
    load_graph,
)

__all__ = [
    "DEFAULT_MUTATIONS_PATH",
    "MutationParser",
    "load_default_graph",
    "load_graph",
]
