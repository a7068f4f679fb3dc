"""
Structural validation and repair of optimized breeding trees.

Checks:
- Reuse consistency: a reusing node must have no parents attached (fatal)
- Impossible parent: a breeding node cannot reuse both parents (repaired)
- Unbacked reuse: a reusing node needs a producer that runs before it, or a
  drone in stock (repaired)
- Missed reuse: duplicated species that could still be reused (warning only)

Repair restores the offending occurrence: its branch is rebuilt from the
mutation graph and stock substitution and both reuse passes are re-run on
that branch alone.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from ..constants import DEFAULT_MAX_REPAIR_PASSES, PRIMARY_ROLE, SECONDARY_ROLE
from ..exceptions import OptimizerInvariantViolation
from ..models.plan import IssueSeverity, PlanIssue
from ..models.stock import Stock
from ..models.tree import BreedingNode, TraversalOrder, Visit, walk
from .reuse_optimizer import reoptimize_branch
from .species_index import SpeciesIndex
from .stock_optimizer import StockOptimizer
from .tree_builder import TreeBuilder

logger = logging.getLogger(__name__)

REUSE_WITH_CHILDREN = "reuse_with_children"
IMPOSSIBLE_PARENT = "impossible_parent"
UNBACKED_REUSE = "unbacked_reuse"
MISSED_REUSE = "missed_reuse"
REPAIRED = "repaired"


@dataclass
class ValidationResult:
    """Outcome of validating (and repairing) a breeding tree."""
    warnings: List[PlanIssue] = field(default_factory=list)
    errors: List[PlanIssue] = field(default_factory=list)
    repairs: int = 0

    @property
    def plan_failed(self) -> bool:
        return len(self.errors) > 0


def find_reuse_inconsistencies(root: BreedingNode) -> List[Visit]:
    """Reusing nodes that still have parents attached."""
    return [
        visit for visit in walk(root)
        if visit.node.reusing and visit.node.has_children
    ]


def find_impossible_parents(root: BreedingNode) -> List[Visit]:
    """Breeding nodes whose two parents are both reusing."""
    return [
        visit for visit in walk(root)
        if visit.node.has_children
        and visit.node.primary.reusing
        and visit.node.secondary.reusing
    ]


def find_unbacked_reuse(root: BreedingNode, stock: Stock) -> List[Visit]:
    """Reusing nodes with no earlier producer and no drone in stock."""
    produced = set()
    unbacked = []
    for visit in walk(root, TraversalOrder.POST):
        node = visit.node
        if node.reusing:
            if node.species not in produced and not stock.has_secondary(node.species):
                unbacked.append(visit)
        elif node.has_children:
            produced.add(node.species)
    return unbacked


def find_missed_reuse(root: BreedingNode) -> List[PlanIssue]:
    """
    Report duplicated species with fewer reused occurrences than allowed.

    An occurrence could additionally be reused when it is still bred in
    place, is not the tree root, and its sibling is not reusing. At least one
    occurrence has to stay bred.

    Returns:
        Warning issues, one per species
    """
    index = SpeciesIndex.from_tree(root)
    issues = []
    for species in index.duplicated():
        info = index[species]
        producers = info.producers
        eligible = [
            visit for visit in producers
            if visit.parent is not None
            and not (visit.sibling is not None and visit.sibling.reusing)
        ]
        potential = min(len(eligible), len(producers) - 1)
        if potential <= 0:
            continue
        issues.append(PlanIssue(
            code=MISSED_REUSE,
            severity=IssueSeverity.WARNING,
            message=(
                f"{species} occurs {info.count} times with {info.reused_count} reused; "
                f"{potential} more could be reused"
            ),
            species=species,
            details={
                "occurrences": info.count,
                "reused": info.reused_count,
                "potential_additional_reuse": potential,
            },
        ))
    return issues


def _ancestor_species(root: BreedingNode, target: BreedingNode) -> Tuple[str, ...]:
    """Species on the path from the root down to target (inclusive)."""
    parents = {}
    for visit in walk(root):
        parents[id(visit.node)] = visit.parent
        if visit.node is target:
            break
    path = []
    node = target
    while node is not None:
        path.append(node.species)
        node = parents[id(node)]
    return tuple(reversed(path))


class PlanValidator:
    """
    Validates a breeding tree and repairs what can be repaired.

    Repairs loop until the tree is clean or ``max_repair_passes`` rounds have
    run. Violations left after that are reported as critical errors.
    """

    def __init__(
        self,
        builder: TreeBuilder,
        stock: Stock,
        max_repair_passes: int = DEFAULT_MAX_REPAIR_PASSES,
    ):
        """
        Initialize validator.

        Args:
            builder: Tree builder used to rebuild restored branches
            stock: Stock snapshot
            max_repair_passes: Repair rounds before violations become fatal
        """
        self.builder = builder
        self.stock = stock
        self.max_repair_passes = max_repair_passes

    def validate(self, root: BreedingNode) -> ValidationResult:
        """
        Validate and repair a tree in place.

        Args:
            root: Tree root

        Returns:
            ValidationResult with warnings, errors and repair count
        """
        result = ValidationResult()

        for attempt in range(self.max_repair_passes + 1):
            impossible = find_impossible_parents(root)
            unbacked = [] if impossible else find_unbacked_reuse(root, self.stock)
            if not impossible and not unbacked:
                break
            if attempt == self.max_repair_passes:
                logger.error(
                    f"Repair limit of {self.max_repair_passes} passes reached "
                    f"for {root.species}"
                )
                break

            # Impossible parents first; restoring one can back other reusers
            if impossible:
                for visit in impossible:
                    node = visit.node
                    if node.has_children and node.primary.reusing and node.secondary.reusing:
                        self._restore(root, node, self._deeper_child_role(node), IMPOSSIBLE_PARENT, result)
            else:
                # A restored producer can back later occurrences of its species
                for visit in unbacked:
                    still_unbacked = find_unbacked_reuse(root, self.stock)
                    if any(other.node is visit.node for other in still_unbacked):
                        self._restore(root, visit.parent, visit.role, UNBACKED_REUSE, result)

        for code, visits in (
            (REUSE_WITH_CHILDREN, find_reuse_inconsistencies(root)),
            (IMPOSSIBLE_PARENT, find_impossible_parents(root)),
            (UNBACKED_REUSE, find_unbacked_reuse(root, self.stock)),
        ):
            for visit in visits:
                result.errors.append(self._fatal_issue(code, visit))

        result.warnings.extend(find_missed_reuse(root))

        if result.errors:
            logger.error(
                f"Breeding tree for {root.species} has {len(result.errors)} "
                f"unrepaired invariant violations"
            )
        else:
            logger.debug(
                f"Breeding tree for {root.species} validated "
                f"({result.repairs} repairs, {len(result.warnings)} warnings)"
            )
        return result

    @staticmethod
    def _deeper_child_role(node: BreedingNode) -> str:
        if node.secondary.subtree_depth > node.primary.subtree_depth:
            return SECONDARY_ROLE
        return PRIMARY_ROLE

    def _restore(
        self,
        root: BreedingNode,
        parent: BreedingNode,
        role: str,
        code: str,
        result: ValidationResult,
    ) -> BreedingNode:
        """Rebuild the child in ``role`` and re-optimize that branch alone."""
        old = parent.child(role)
        branch = self.builder.build_subtree(
            old.species,
            self.stock,
            role,
            parent.distance_from_root + 1,
            ancestors=_ancestor_species(root, parent),
        )
        parent.replace_child(role, branch)

        StockOptimizer(self.stock).optimize(branch, parent, role)
        reoptimize_branch(root, branch, parent, role, self.stock)

        result.repairs += 1
        message = f"Restored {role} parent {old.species} of {parent.species} ({code})"
        logger.warning(message)
        result.warnings.append(PlanIssue(
            code=REPAIRED,
            severity=IssueSeverity.INFO,
            message=message,
            species=old.species,
            details={"violation": code, "parent": parent.species, "role": role},
        ))
        return branch

    @staticmethod
    def _fatal_issue(code: str, visit: Visit) -> PlanIssue:
        node = visit.node
        parent = visit.parent.species if visit.parent is not None else None
        error = OptimizerInvariantViolation(
            code,
            node.species,
            f"Invariant '{code}' violated at {node.species}",
            context={"parent": parent, "distance_from_root": node.distance_from_root},
        )
        logger.error(str(error))
        return PlanIssue(
            code=code,
            severity=IssueSeverity.CRITICAL,
            message=error.message,
            species=node.species,
            details=dict(error.context),
        )


def validate_breeding_tree(
    root: BreedingNode,
    builder: TreeBuilder,
    stock: Stock,
    max_repair_passes: int = DEFAULT_MAX_REPAIR_PASSES,
) -> ValidationResult:
    """
    Convenience function to validate and repair a breeding tree.

    Args:
        root: Tree root
        builder: Tree builder used to rebuild restored branches
        stock: Stock snapshot
        max_repair_passes: Repair rounds before violations become fatal

    Returns:
        ValidationResult
    """
    return PlanValidator(builder, stock, max_repair_passes).validate(root)
