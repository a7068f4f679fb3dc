"""Aggregate stock requirements of a finalized breeding tree."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..constants import SECONDARY_ROLE
from ..models.plan import Requirement
from ..models.stock import Stock
from ..models.tree import BreedingNode, TraversalOrder, walk

logger = logging.getLogger(__name__)


@dataclass
class RequirementSummary:
    """
    Stock requirements of a breeding tree.

    Attributes:
        starting_primaries: Princesses to load from stock, in traversal order
        requirements: Species -> drone Requirement for every secondary-role species
        missing_primary: Leaf species -> princesses missing from stock
        missing_secondary: Leaf species -> drones missing from stock
        needed_primary: Species -> princesses consumed from stock by the tree
        needed_secondary: Species -> drones consumed from stock by the tree
    """
    starting_primaries: List[str] = field(default_factory=list)
    requirements: Dict[str, Requirement] = field(default_factory=dict)
    missing_primary: Dict[str, int] = field(default_factory=dict)
    missing_secondary: Dict[str, int] = field(default_factory=dict)
    needed_primary: Dict[str, int] = field(default_factory=dict)
    needed_secondary: Dict[str, int] = field(default_factory=dict)

    @property
    def can_execute(self) -> bool:
        return not self.missing_primary and not self.missing_secondary


class RequirementCalculator:
    """
    Computes stock shortfalls for a finalized breeding tree.

    Leaves are the units the tree draws from stock. A leaf marked
    ``reusing`` draws from production elsewhere in the tree instead, so it
    does not count. Base species are always leaves and never reusing. A
    composite species cut by stock substitution, or left as a leaf where it
    closes a mutation cycle, is drawn from stock the same way, so the
    ``missing_*`` maps can name non-base species.
    """

    def __init__(self, stock: Stock):
        self.stock = stock

    def calculate(self, root: Optional[BreedingNode]) -> RequirementSummary:
        """
        Walk the tree and aggregate requirements.

        Args:
            root: Finalized tree root (None for an empty plan)

        Returns:
            RequirementSummary
        """
        summary = RequirementSummary()
        if root is None:
            return summary

        needed_primary: Counter = Counter()
        needed_secondary: Counter = Counter()
        drones_needed: Counter = Counter()

        for visit in walk(root, TraversalOrder.PRE):
            node = visit.node
            if visit.role == SECONDARY_ROLE:
                drones_needed[node.species] += 1

            if node.has_children or node.reusing or visit.parent is None:
                continue
            if node.need_primary:
                needed_primary[node.species] += 1
                summary.starting_primaries.append(node.species)
            if node.need_secondary:
                needed_secondary[node.species] += 1

        summary.needed_primary = dict(sorted(needed_primary.items()))
        summary.needed_secondary = dict(sorted(needed_secondary.items()))
        summary.missing_primary = self._shortfalls(needed_primary, self.stock.primary_count)
        summary.missing_secondary = self._shortfalls(needed_secondary, self.stock.secondary_count)
        summary.requirements = {
            species: Requirement(available=self.stock.secondary_count(species), needed=count)
            for species, count in sorted(drones_needed.items())
        }

        if not summary.can_execute:
            logger.info(
                f"Plan for {root.species} is missing princesses {summary.missing_primary} "
                f"and drones {summary.missing_secondary}"
            )
        return summary

    @staticmethod
    def _shortfalls(needed: Counter, held) -> Dict[str, int]:
        shortfalls = {}
        for species, count in sorted(needed.items()):
            missing = count - held(species)
            if missing > 0:
                shortfalls[species] = missing
        return shortfalls


def calculate_requirements(root: Optional[BreedingNode], stock: Stock) -> RequirementSummary:
    """Convenience function wrapping RequirementCalculator."""
    return RequirementCalculator(stock).calculate(root)
