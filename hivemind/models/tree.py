"""
Breeding tree nodes and the traversal primitive shared by every pass.

A breeding tree is a binary tree: each internal node is bred from its primary
child (princess lineage) and its secondary child (drone lineage). Leaves come
from stock, or are occurrences whose production is reused from elsewhere.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, NamedTuple, Optional, Tuple

from ..constants import PRIMARY_ROLE, SECONDARY_ROLE


@dataclass(eq=False)
class BreedingNode:
    """
    One occurrence of a species in a breeding tree.

    Attributes:
        species: Species this node stands for
        primary: Princess lineage subtree (None for leaves)
        secondary: Drone lineage subtree (None for leaves)
        need_primary: Occurrence consumes a princess in its parent's breeding step
        need_secondary: Occurrence consumes a drone in its parent's breeding step
        reusing: Not bred here; another occurrence already produces the species
        reused_from_stock: Subtree replaced by units already held in stock
        distance_from_root: Number of edges between the root and this node
        subtree_depth: Height of the subtree as tagged by pre-exploration
        build_order: Creation sequence number, used as deterministic tie-breaker
    """
    species: str
    primary: Optional["BreedingNode"] = None
    secondary: Optional["BreedingNode"] = None
    need_primary: bool = False
    need_secondary: bool = False
    reusing: bool = False
    reused_from_stock: bool = False
    distance_from_root: int = 0
    subtree_depth: int = 0
    build_order: int = 0

    @property
    def has_children(self) -> bool:
        """True if this node still requires a breeding step."""
        return self.primary is not None or self.secondary is not None

    def set_children(self, primary: "BreedingNode", secondary: "BreedingNode") -> None:
        """Attach both parents; a node is either a leaf or a full breeding node."""
        if primary is None or secondary is None:
            raise ValueError(f"{self.species}: both parents must be attached together")
        self.primary = primary
        self.secondary = secondary

    def prune(self) -> None:
        """Discard both subtrees."""
        self.primary = None
        self.secondary = None

    def child(self, role: str) -> Optional["BreedingNode"]:
        """Return the child in the given role."""
        if role == PRIMARY_ROLE:
            return self.primary
        if role == SECONDARY_ROLE:
            return self.secondary
        raise ValueError(f"Unknown role: {role}")

    def replace_child(self, role: str, node: "BreedingNode") -> None:
        """Swap the child in the given role for another subtree."""
        if role == PRIMARY_ROLE:
            self.primary = node
        elif role == SECONDARY_ROLE:
            self.secondary = node
        else:
            raise ValueError(f"Unknown role: {role}")

    def children(self) -> Tuple[Tuple[str, "BreedingNode"], ...]:
        """(role, child) pairs in primary-then-secondary order."""
        if not self.has_children:
            return ()
        return ((PRIMARY_ROLE, self.primary), (SECONDARY_ROLE, self.secondary))

    def __repr__(self) -> str:
        flags = []
        if self.reusing:
            flags.append("reusing")
        if self.reused_from_stock:
            flags.append("stock")
        flag_str = f" [{', '.join(flags)}]" if flags else ""
        kind = "breed" if self.has_children else "leaf"
        return f"BreedingNode({self.species}, {kind}, d={self.distance_from_root}{flag_str})"


class TraversalOrder(Enum):
    """Node visiting order for ``walk``."""
    PRE = "pre"
    POST = "post"
    LEVEL = "level"


class Visit(NamedTuple):
    """A node seen during a walk, with its parent and role in that parent."""
    node: BreedingNode
    parent: Optional[BreedingNode]
    role: Optional[str]

    @property
    def sibling(self) -> Optional[BreedingNode]:
        """The other child of this node's parent (None for the root)."""
        if self.parent is None:
            return None
        if self.role == PRIMARY_ROLE:
            return self.parent.secondary
        return self.parent.primary


def walk(
    root: Optional[BreedingNode],
    order: TraversalOrder = TraversalOrder.PRE,
    parent: Optional[BreedingNode] = None,
    role: Optional[str] = None,
) -> Iterator[Visit]:
    """
    Visit every node of a breeding tree in the requested order.

    Pre-order and level-order read a node's children only after the caller has
    seen the node, so a pass may prune the node it is visiting and the pruned
    subtree is never entered. Post-order fixes a node's children when it first
    descends into it; pruning a node during its own post-order visit is safe
    because its subtree has already been visited.

    Args:
        root: Subtree root (None yields nothing)
        order: Visiting order
        parent: Parent of ``root`` when walking a subtree in place
        role: Role of ``root`` in ``parent``

    Yields:
        Visit tuples (node, parent, role); the primary child is always visited
        before the secondary child
    """
    if root is None:
        return

    start = Visit(root, parent, role)

    if order == TraversalOrder.LEVEL:
        queue = deque([start])
        while queue:
            visit = queue.popleft()
            yield visit
            for child_role, child in visit.node.children():
                queue.append(Visit(child, visit.node, child_role))

    elif order == TraversalOrder.PRE:
        stack = [start]
        while stack:
            visit = stack.pop()
            yield visit
            for child_role, child in reversed(visit.node.children()):
                stack.append(Visit(child, visit.node, child_role))

    elif order == TraversalOrder.POST:
        stack = [(start, False)]
        while stack:
            visit, expanded = stack.pop()
            if expanded:
                yield visit
                continue
            stack.append((visit, True))
            for child_role, child in reversed(visit.node.children()):
                stack.append((Visit(child, visit.node, child_role), False))

    else:
        raise ValueError(f"Unknown traversal order: {order}")


def count_breeding_steps(root: Optional[BreedingNode]) -> int:
    """Count nodes that still require a breeding step."""
    return sum(1 for visit in walk(root) if visit.node.has_children)


def count_nodes(root: Optional[BreedingNode]) -> int:
    return sum(1 for _ in walk(root))


def contains(root: Optional[BreedingNode], target: BreedingNode) -> bool:
    """Check whether ``target`` (by identity) is part of the subtree at ``root``."""
    return any(visit.node is target for visit in walk(root))
