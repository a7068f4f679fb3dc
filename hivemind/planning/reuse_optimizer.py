"""
Reuse of duplicate intermediate production.

A species that appears several times in a breeding tree only has to be bred
once: a bred queen yields enough drones for at least one more consumer, so
later occurrences are turned into ``reusing`` leaves that refer to that
production. Two passes do the conversion:

- Climbing pass: post-order walk with a per-species counter of producers
  that are available for reuse.
- Second candidate pass: catches breeding nodes whose two parents are both
  still bred in place and converts one of them where another producer (or a
  drone in stock) can stand in.

A node never reuses when its sibling already does; both parents of one
breeding step cannot come from elsewhere.
"""

import logging
from collections import Counter
from typing import Dict, Optional, Tuple

from ..constants import PRIMARY_ROLE, SECONDARY_ROLE
from ..models.stock import Stock
from ..models.tree import BreedingNode, TraversalOrder, Visit, walk
from .species_index import SpeciesIndex, pre_explore

logger = logging.getLogger(__name__)


def _mark_reusing(node: BreedingNode) -> None:
    node.reusing = True
    node.prune()


def _rollback_contributions(node: BreedingNode, counter: Counter) -> None:
    """Undo the counter updates made for the descendants of node."""
    for visit in walk(node, TraversalOrder.PRE):
        descendant = visit.node
        if descendant is node:
            continue
        if descendant.reusing:
            counter[descendant.species] += 1
        elif descendant.has_children:
            counter[descendant.species] -= 1


class ReuseOptimizer:
    """Runs pre-exploration and both reuse passes over a breeding tree."""

    def __init__(self, stock: Stock):
        self.stock = stock

    def optimize(self, root: BreedingNode) -> SpeciesIndex:
        """
        Run pre-exploration, the climbing pass and the second pass.

        Args:
            root: Tree root

        Returns:
            SpeciesIndex of the optimized tree
        """
        index = pre_explore(root)
        climbed = self.climb(root, index)
        index = SpeciesIndex.from_tree(root)
        index, converted = self.second_pass(root, index)
        logger.debug(
            f"Reuse optimization for {root.species}: {climbed} climbing conversions, "
            f"{converted} second-pass conversions"
        )
        return index

    def climb(
        self,
        root: BreedingNode,
        index: SpeciesIndex,
        parent: Optional[BreedingNode] = None,
        role: Optional[str] = None,
    ) -> int:
        """
        Climbing pass: reuse later occurrences of species already bred.

        Args:
            root: Tree root, or branch root when optimizing one branch in place
            index: Index over the whole tree
            parent: Parent of ``root`` when optimizing a branch
            role: Role of ``root`` in ``parent``

        Returns:
            Number of nodes converted to reusing
        """
        counter: Counter = Counter()
        converted = 0

        for visit in walk(root, TraversalOrder.POST, parent, role):
            node = visit.node
            if not node.has_children:
                continue

            if self._can_climb(visit, index, counter):
                _rollback_contributions(node, counter)
                _mark_reusing(node)
                counter[node.species] -= 1
                converted += 1
            else:
                counter[node.species] += 1

        return converted

    def _can_climb(self, visit: Visit, index: SpeciesIndex, counter: Counter) -> bool:
        node = visit.node
        info = index.get(node.species)
        if info is None or info.count <= 1:
            return False
        if counter[node.species] <= 0:
            return False
        if info.is_uniquely_shallowest(node):
            return False
        sibling = visit.sibling
        return sibling is None or not sibling.reusing

    def second_pass(
        self,
        root: BreedingNode,
        index: SpeciesIndex,
        scope: Optional[BreedingNode] = None,
    ) -> Tuple[SpeciesIndex, int]:
        """
        Second candidate pass: convert one parent of fully bred breeding steps.

        Candidates are breeding nodes whose two children are both still bred in
        place, processed by (distance from root, build order). A child can be
        converted when another producer of its species outside the child's own
        subtree runs before it, or when a drone of the species is in stock.
        At most one child per candidate is converted.

        Args:
            root: Tree root
            index: Index over the whole tree
            scope: Only collect candidates from this branch (None = whole tree)

        Returns:
            (rebuilt SpeciesIndex, number of nodes converted)
        """
        candidates = [
            visit.node for visit in walk(scope or root, TraversalOrder.LEVEL)
            if self._is_candidate(visit.node)
        ]
        candidates.sort(key=lambda node: (node.distance_from_root, node.build_order))

        position = _post_order_positions(root)
        converted = 0

        for node in candidates:
            if not index.contains_node(node) or not self._is_candidate(node):
                continue
            for role in (SECONDARY_ROLE, PRIMARY_ROLE):
                child = node.child(role)
                if self._has_prior_producer(child, index, position) or self.stock.has_secondary(child.species):
                    _mark_reusing(child)
                    converted += 1
                    logger.debug(
                        f"Second pass: {role} parent {child.species} of {node.species} now reused"
                    )
                    index = SpeciesIndex.from_tree(root)
                    break

        return index, converted

    @staticmethod
    def _is_candidate(node: BreedingNode) -> bool:
        if not node.has_children or node.reusing:
            return False
        return all(
            child.has_children and not child.reusing
            for _, child in node.children()
        )

    @staticmethod
    def _has_prior_producer(
        child: BreedingNode,
        index: SpeciesIndex,
        position: Dict[int, int],
    ) -> bool:
        info = index.get(child.species)
        if info is None:
            return False
        own_subtree = {id(visit.node) for visit in walk(child)}
        child_position = position[id(child)]
        return any(
            id(producer.node) not in own_subtree
            and position.get(id(producer.node), child_position) < child_position
            for producer in info.producers
        )


def _post_order_positions(root: BreedingNode) -> Dict[int, int]:
    """Execution position of every node, keyed by node identity."""
    return {id(visit.node): i for i, visit in enumerate(walk(root, TraversalOrder.POST))}


def optimize_reuse(root: BreedingNode, stock: Stock) -> SpeciesIndex:
    """
    Convenience function to run every reuse pass on a tree.

    Args:
        root: Tree root (after stock optimization)
        stock: Stock snapshot

    Returns:
        SpeciesIndex of the optimized tree
    """
    return ReuseOptimizer(stock).optimize(root)


def reoptimize_branch(
    root: BreedingNode,
    branch: BreedingNode,
    parent: BreedingNode,
    role: str,
    stock: Stock,
) -> SpeciesIndex:
    """
    Re-run pre-exploration and both reuse passes on one branch in place.

    Args:
        root: Tree root
        branch: Branch root (already attached to ``parent``)
        parent: Parent of the branch
        role: Role of the branch in ``parent``
        stock: Stock snapshot

    Returns:
        SpeciesIndex over the whole tree
    """
    optimizer = ReuseOptimizer(stock)
    pre_explore(branch, distance_offset=parent.distance_from_root + 1)
    index = SpeciesIndex.from_tree(root)
    optimizer.climb(branch, index, parent, role)
    index = SpeciesIndex.from_tree(root)
    index, _ = optimizer.second_pass(root, index, scope=branch)
    return index
