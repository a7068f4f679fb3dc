"""
Mutation graph for breeding lookups and analysis.

This module holds the static mutation database: species -> (princess parent,
drone parent). Lookups go through a plain dictionary; analysis queries (base
ancestors, cycles, per-mod filtering) go through a NetworkX directed graph
with parent -> child edges.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

import networkx as nx

from ..constants import PRIMARY_ROLE, SECONDARY_ROLE
from ..models.species import MutationRule

logger = logging.getLogger(__name__)


class ProductionGraph:
    """
    Static mutation database.

    A species with a rule is a composite species bred from exactly two parents;
    a species without one is a base species that must come from stock.
    When several rules produce the same species the last one added wins.
    """

    def __init__(self, rules: Optional[Iterable[MutationRule]] = None):
        """
        Initialize graph with mutation rules.

        Args:
            rules: Mutation rules, applied in order
        """
        self.rules: Dict[str, MutationRule] = {}
        self._graph: Optional[nx.DiGraph] = None
        for rule in rules or []:
            self.add_rule(rule)

    def add_rule(self, rule: MutationRule) -> None:
        """Add a rule, replacing any earlier rule for the same species."""
        existing = self.rules.get(rule.species)
        if existing is not None and existing != rule:
            logger.warning(
                f"Duplicate mutation for {rule.species}: replacing "
                f"'{existing}' with '{rule}'"
            )
        self.rules[rule.species] = rule
        self._graph = None

    def lookup(self, species: str) -> Optional[Tuple[str, str]]:
        """
        Get the parents of a species.

        Args:
            species: Species name

        Returns:
            (primary_parent, secondary_parent), or None for a base species
        """
        rule = self.rules.get(species)
        if rule is None:
            return None
        return rule.parents

    def rule(self, species: str) -> Optional[MutationRule]:
        return self.rules.get(species)

    def is_base(self, species: str) -> bool:
        """Check if species has no mutation (must come from stock)."""
        return species not in self.rules

    def is_known(self, species: str) -> bool:
        """Check if species appears anywhere in the database."""
        return species in self.get_graph()

    def get_graph(self) -> nx.DiGraph:
        """
        Get the analysis graph, building it first if necessary.

        Returns:
            NetworkX DiGraph with species as nodes and parent -> child edges.
            Edges carry a ``roles`` attribute listing the roles the parent
            plays in the child's mutation.
        """
        if self._graph is None:
            self._graph = self._build_graph()
        return self._graph

    def _build_graph(self) -> nx.DiGraph:
        graph = nx.DiGraph()

        for rule in self.rules.values():
            graph.add_node(rule.species, mod=rule.mod, base=False)

        for rule in self.rules.values():
            for parent, role in ((rule.primary_parent, PRIMARY_ROLE),
                                 (rule.secondary_parent, SECONDARY_ROLE)):
                if parent not in graph:
                    graph.add_node(parent, mod=None, base=True)
                if graph.has_edge(parent, rule.species):
                    graph.edges[parent, rule.species]['roles'].append(role)
                else:
                    graph.add_edge(parent, rule.species, roles=[role])

        logger.debug(
            f"Built mutation graph: {graph.number_of_nodes()} species, "
            f"{graph.number_of_edges()} parent links"
        )
        return graph

    def species(self, mod: Optional[str] = None) -> List[str]:
        """
        List species known to the database.

        Args:
            mod: Restrict to composite species added by this mod

        Returns:
            Sorted species names
        """
        if mod is None:
            return sorted(self.get_graph().nodes)
        return sorted(s for s, rule in self.rules.items() if rule.mod == mod)

    def base_species(self) -> List[str]:
        """Sorted species that appear only as parents."""
        graph = self.get_graph()
        return sorted(s for s in graph.nodes if s not in self.rules)

    def mods(self) -> List[str]:
        return sorted({rule.mod for rule in self.rules.values()})

    def base_species_for(self, target: str) -> List[str]:
        """
        Find the base species a target ultimately descends from.

        Args:
            target: Species name

        Returns:
            Sorted base species among the target's ancestors (the target itself
            when it is a base species)
        """
        graph = self.get_graph()
        if target not in graph:
            return []
        if self.is_base(target):
            return [target]
        return sorted(s for s in nx.ancestors(graph, target) if self.is_base(s))

    def find_cycles(self) -> List[List[str]]:
        """
        Find mutation cycles (species that are their own ancestors).

        Returns:
            Cycles as species lists, each rotated to start at its smallest name
        """
        cycles = []
        for cycle in nx.simple_cycles(self.get_graph()):
            start = cycle.index(min(cycle))
            cycles.append(cycle[start:] + cycle[:start])
        return sorted(cycles)

    def filter_by_mods(self, mods: Iterable[str]) -> "ProductionGraph":
        """
        Restrict the database to rules added by the given mods.

        Args:
            mods: Mod names to keep

        Returns:
            New ProductionGraph (species from dropped mods become base species)
        """
        keep: Set[str] = set(mods)
        unknown = keep - set(self.mods())
        if unknown:
            logger.warning(f"Enabled mods not present in mutation database: {sorted(unknown)}")
        filtered = ProductionGraph(rule for rule in self.rules.values() if rule.mod in keep)
        logger.info(
            f"Filtered mutation database to {len(filtered)} of {len(self)} rules "
            f"for mods {sorted(keep)}"
        )
        return filtered

    def __len__(self) -> int:
        return len(self.rules)

    def __contains__(self, species: str) -> bool:
        return self.is_known(species)

    def __str__(self) -> str:
        """String representation."""
        return f"ProductionGraph({len(self.rules)} mutations, {len(self.mods())} mods)"
