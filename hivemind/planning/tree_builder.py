"""
Breeding tree construction.

Expands a target species into a complete binary breeding tree from the
mutation graph. The tree is always built to full depth; stock substitution
happens afterwards so that the stock optimizer can choose the shallowest cut.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..constants import PRIMARY_ROLE, SECONDARY_ROLE
from ..exceptions import PlanningFailure
from ..graph.production_graph import ProductionGraph
from ..models.stock import Stock
from ..models.tree import BreedingNode, count_nodes

logger = logging.getLogger(__name__)


@dataclass
class CycleBreak:
    """A species that reappeared on its own ancestor path and became a leaf.

    Attributes:
        species: Species that closed the cycle
        path: Ancestor species from the root down to the cut
    """
    species: str
    path: Tuple[str, ...]

    def __str__(self) -> str:
        return " -> ".join(self.path + (self.species,))


class TreeBuilder:
    """
    Builds breeding trees from a mutation graph.

    Every node gets a creation sequence number (``build_order``) in pre-order,
    which later passes use as a deterministic tie-breaker. The counter keeps
    running across ``build_subtree`` calls so rebuilt branches sort after the
    original tree.
    """

    def __init__(self, graph: ProductionGraph):
        """
        Initialize builder.

        Args:
            graph: Mutation database
        """
        self.graph = graph
        self.cycle_breaks: List[CycleBreak] = []
        self._sequence = itertools.count()

    def build(self, target: str, stock: Stock) -> BreedingNode:
        """
        Expand a target into its full breeding tree.

        Args:
            target: Species to produce
            stock: Stock snapshot (sets the root's need flags)

        Returns:
            Root BreedingNode

        Raises:
            PlanningFailure: If the target has no mutation and is not fully held
        """
        if self.graph.is_base(target) and not stock.has_both(target):
            if self.graph.is_known(target):
                message = f"'{target}' is a base species with no mutation; it must come from stock"
            else:
                message = f"Unknown species '{target}': no mutation produces it"
            raise PlanningFailure(
                target,
                message,
                context={
                    "has_princess": stock.has_primary(target),
                    "has_drone": stock.has_secondary(target),
                },
            )

        root = self._expand(target, role=None, distance=0, ancestors=())
        root.need_primary = not stock.has_primary(target)
        root.need_secondary = not stock.has_secondary(target)

        logger.debug(f"Built breeding tree for {target}: {count_nodes(root)} nodes")
        return root

    def build_subtree(
        self,
        species: str,
        stock: Stock,
        role: str,
        distance: int,
        ancestors: Sequence[str] = (),
    ) -> BreedingNode:
        """
        Rebuild one branch of a tree from the mutation graph.

        Args:
            species: Species at the branch root
            stock: Stock snapshot
            role: Role the branch root plays in its parent
            distance: Distance of the branch root from the tree root
            ancestors: Species on the path from the tree root to the parent

        Returns:
            Branch root BreedingNode
        """
        if role not in (PRIMARY_ROLE, SECONDARY_ROLE):
            raise ValueError(f"Unknown role: {role}")
        return self._expand(species, role=role, distance=distance, ancestors=tuple(ancestors))

    def _expand(
        self,
        species: str,
        role: Optional[str],
        distance: int,
        ancestors: Tuple[str, ...],
    ) -> BreedingNode:
        node = BreedingNode(
            species=species,
            need_primary=role == PRIMARY_ROLE,
            need_secondary=role == SECONDARY_ROLE,
            distance_from_root=distance,
            build_order=next(self._sequence),
        )

        parents = self.graph.lookup(species)
        if parents is None:
            return node

        if species in ancestors:
            cycle = CycleBreak(species=species, path=ancestors)
            self.cycle_breaks.append(cycle)
            logger.warning(f"Mutation cycle {cycle}: {species} must come from stock")
            return node

        path = ancestors + (species,)
        primary_parent, secondary_parent = parents
        node.set_children(
            self._expand(primary_parent, PRIMARY_ROLE, distance + 1, path),
            self._expand(secondary_parent, SECONDARY_ROLE, distance + 1, path),
        )
        return node
