"""
Per-species occurrence index over a breeding tree.

The index never owns or mutates tree nodes: it is rebuilt from the tree
whenever a pass changes the tree's structure. Only ``pre_explore`` writes the
``distance_from_root`` and ``subtree_depth`` tags the index is built from.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from ..models.tree import BreedingNode, TraversalOrder, Visit, walk


@dataclass
class SpeciesInfo:
    """
    Occurrences of one species in a breeding tree.

    Attributes:
        species: Species name
        count: Number of occurrences
        min_distance: Smallest distance from the root among occurrences
        count_at_min_distance: Occurrences sitting at that smallest distance
        min_subtree_depth: Smallest tagged subtree depth among occurrences
        occurrences: Visits ordered by (distance, build order, species)
    """
    species: str
    count: int = 0
    min_distance: Optional[int] = None
    count_at_min_distance: int = 0
    min_subtree_depth: Optional[int] = None
    occurrences: List[Visit] = field(default_factory=list)

    @property
    def reused_count(self) -> int:
        return sum(1 for visit in self.occurrences if visit.node.reusing)

    @property
    def producers(self) -> List[Visit]:
        """Occurrences that are still bred in place."""
        return [
            visit for visit in self.occurrences
            if visit.node.has_children and not visit.node.reusing
        ]

    def is_uniquely_shallowest(self, node: BreedingNode) -> bool:
        """Check if node is the single occurrence closest to the root."""
        return node.distance_from_root == self.min_distance and self.count_at_min_distance == 1


def _sort_key(visit: Visit):
    node = visit.node
    return (node.distance_from_root, node.build_order, node.species)


class SpeciesIndex:
    """Read-only species -> SpeciesInfo map for one tree."""

    def __init__(self, infos: Dict[str, SpeciesInfo]):
        self._infos = infos

    @classmethod
    def from_tree(cls, root: Optional[BreedingNode]) -> "SpeciesIndex":
        """
        Build the index from the current tree and its tags.

        Args:
            root: Tree root

        Returns:
            SpeciesIndex
        """
        infos: Dict[str, SpeciesInfo] = {}
        for visit in walk(root, TraversalOrder.PRE):
            node = visit.node
            info = infos.setdefault(node.species, SpeciesInfo(species=node.species))
            info.count += 1
            info.occurrences.append(visit)

            if info.min_distance is None or node.distance_from_root < info.min_distance:
                info.min_distance = node.distance_from_root
                info.count_at_min_distance = 1
            elif node.distance_from_root == info.min_distance:
                info.count_at_min_distance += 1

            if info.min_subtree_depth is None or node.subtree_depth < info.min_subtree_depth:
                info.min_subtree_depth = node.subtree_depth

        for info in infos.values():
            info.occurrences.sort(key=_sort_key)
        return cls(infos)

    def __getitem__(self, species: str) -> SpeciesInfo:
        return self._infos[species]

    def __contains__(self, species: str) -> bool:
        return species in self._infos

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._infos))

    def __len__(self) -> int:
        return len(self._infos)

    def get(self, species: str) -> Optional[SpeciesInfo]:
        return self._infos.get(species)

    def count(self, species: str) -> int:
        info = self._infos.get(species)
        return info.count if info else 0

    def duplicated(self) -> List[str]:
        """Sorted species that occur more than once."""
        return sorted(s for s, info in self._infos.items() if info.count > 1)

    def contains_node(self, node: BreedingNode) -> bool:
        """Check if node (by identity) is still attached to the indexed tree."""
        info = self._infos.get(node.species)
        return info is not None and any(visit.node is node for visit in info.occurrences)


def pre_explore(root: BreedingNode, distance_offset: int = 0) -> SpeciesIndex:
    """
    Tag every node with its distance from the root and its subtree depth.

    Args:
        root: Tree root, or branch root when re-exploring one branch
        distance_offset: Distance of ``root`` from the tree root

    Returns:
        SpeciesIndex over the explored (sub)tree
    """
    for visit in walk(root, TraversalOrder.PRE):
        if visit.parent is None:
            visit.node.distance_from_root = distance_offset
        else:
            visit.node.distance_from_root = visit.parent.distance_from_root + 1

    for visit in walk(root, TraversalOrder.POST):
        node = visit.node
        if node.has_children:
            node.subtree_depth = 1 + max(node.primary.subtree_depth, node.secondary.subtree_depth)
        else:
            node.subtree_depth = 0

    return SpeciesIndex.from_tree(root)
