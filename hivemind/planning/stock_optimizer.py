"""Substitution of breeding subtrees by units already held in stock."""

import logging
from typing import Optional

from ..constants import PRIMARY_ROLE
from ..models.stock import Stock
from ..models.tree import BreedingNode, TraversalOrder, walk

logger = logging.getLogger(__name__)


class StockOptimizer:
    """
    Cuts subtrees whose species is already held in the role it is consumed in.

    The tree is visited level by level, so shallow substitutions are committed
    before any deeper subtree is inspected. A cut node keeps its place in the
    tree as a leaf marked ``reused_from_stock``; its descendants are never
    visited. The tree root is the production target and is never cut.
    """

    def __init__(self, stock: Stock):
        self.stock = stock

    def is_held(self, species: str, role: Optional[str]) -> bool:
        """Check if a unit of species is held for the given role."""
        if role == PRIMARY_ROLE:
            return self.stock.has_primary(species)
        return self.stock.has_secondary(species)

    def optimize(
        self,
        root: BreedingNode,
        parent: Optional[BreedingNode] = None,
        role: Optional[str] = None,
    ) -> int:
        """
        Substitute stock for every satisfiable subtree.

        Args:
            root: Tree root, or branch root when optimizing one branch in place
            parent: Parent of ``root`` when optimizing a branch
            role: Role of ``root`` in ``parent``

        Returns:
            Number of nodes cut
        """
        cuts = 0
        for visit in walk(root, TraversalOrder.LEVEL, parent, role):
            node = visit.node
            if visit.parent is None or node.reused_from_stock or node.reusing:
                continue
            if self.is_held(node.species, visit.role):
                node.reused_from_stock = True
                node.prune()
                cuts += 1

        if cuts:
            logger.debug(f"Stock substitution cut {cuts} subtrees below {root.species}")
        return cuts
