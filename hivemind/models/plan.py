"""Plan data model: requirements, diagnostics and the assembled breeding plan."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .tree import BreedingNode, TraversalOrder, walk


@dataclass
class Requirement:
    """Drone demand for one species in the secondary role.

    Attributes:
        available: Drones held (snapshot at planning time, a ledger during execution)
        needed: Drones still to be consumed by breeding steps
    """
    available: int = 0
    needed: int = 0

    @property
    def shortfall(self) -> int:
        """Drones missing to cover the remaining demand."""
        return max(0, self.needed - self.available)

    @property
    def is_satisfied(self) -> bool:
        return self.available >= self.needed


class IssueSeverity(Enum):
    """Plan diagnostic severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass
class PlanIssue:
    """A diagnostic produced while assembling a plan.

    Attributes:
        code: Machine readable issue code (e.g. "missed_reuse", "cycle_break")
        severity: How the issue affects plan validity
        message: Human readable description
        species: Species the issue refers to, if any
        details: Extra numeric or textual details
    """
    code: str
    severity: IssueSeverity
    message: str
    species: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """String representation."""
        prefix = f"[{self.severity.value.upper()}] {self.code}"
        if self.species:
            prefix += f" ({self.species})"
        return f"{prefix}: {self.message}"


@dataclass
class BreedingStep:
    """One breeding operation in execution order."""
    index: int
    species: str
    primary_parent: str
    secondary_parent: str

    def __str__(self) -> str:
        return f"{self.index}. {self.primary_parent} + {self.secondary_parent} -> {self.species}"


@dataclass
class BreedingPlan:
    """
    Result of breeding plan assembly.

    A plan is pure derived data: it is recomputed from the mutation graph,
    the stock snapshot and the target on every invocation.

    Attributes:
        target: Species to produce
        tree: Finalized breeding tree (None when the target is already held)
        starting_primaries: Leaf princesses to load, in traversal order
        requirements: Species -> drone Requirement for every secondary-role species
        total_steps: Number of breeding operations still required
        missing_primary: Leaf species -> princesses missing from stock (base species, or a
            composite species left as a leaf by a stock cut or a mutation cycle)
        missing_secondary: Leaf species -> drones missing from stock (as above)
        can_execute: True when no leaf units are missing
        warnings: Non-fatal diagnostics
        errors: Fatal diagnostics left after repair
        plan_failed: True when fatal invariant violations could not be repaired
    """
    target: str
    tree: Optional[BreedingNode] = None
    starting_primaries: List[str] = field(default_factory=list)
    requirements: Dict[str, Requirement] = field(default_factory=dict)
    total_steps: int = 0
    missing_primary: Dict[str, int] = field(default_factory=dict)
    missing_secondary: Dict[str, int] = field(default_factory=dict)
    can_execute: bool = True
    warnings: List[PlanIssue] = field(default_factory=list)
    errors: List[PlanIssue] = field(default_factory=list)
    plan_failed: bool = False

    @property
    def is_empty(self) -> bool:
        """True when no breeding is required."""
        return self.tree is None or self.total_steps == 0

    @property
    def is_usable(self) -> bool:
        """True when the plan can be handed to the executor."""
        return not self.plan_failed and self.can_execute

    def steps(self) -> List[BreedingStep]:
        """List breeding operations in the order the executor runs them."""
        steps = []
        for visit in walk(self.tree, TraversalOrder.POST):
            node = visit.node
            if node.has_children:
                steps.append(BreedingStep(
                    index=len(steps) + 1,
                    species=node.species,
                    primary_parent=node.primary.species,
                    secondary_parent=node.secondary.species,
                ))
        return steps

    def to_dict(self) -> Dict[str, Any]:
        """Convert plan to a JSON-serializable dictionary."""
        return {
            'target': self.target,
            'tree': node_to_dict(self.tree),
            'steps': [
                {
                    'index': step.index,
                    'species': step.species,
                    'primary_parent': step.primary_parent,
                    'secondary_parent': step.secondary_parent,
                }
                for step in self.steps()
            ],
            'starting_primaries': list(self.starting_primaries),
            'requirements': {
                species: {'available': req.available, 'needed': req.needed}
                for species, req in self.requirements.items()
            },
            'total_steps': self.total_steps,
            'missing_primary': dict(self.missing_primary),
            'missing_secondary': dict(self.missing_secondary),
            'can_execute': self.can_execute,
            'plan_failed': self.plan_failed,
            'warnings': [_issue_to_dict(issue) for issue in self.warnings],
            'errors': [_issue_to_dict(issue) for issue in self.errors],
        }

    def __str__(self) -> str:
        """String representation."""
        status = "FAILED" if self.plan_failed else ("ready" if self.can_execute else "missing stock")
        return (
            f"BreedingPlan({self.target}: {self.total_steps} steps, {status}, "
            f"{len(self.warnings)} warnings, {len(self.errors)} errors)"
        )


def node_to_dict(node: Optional[BreedingNode]) -> Optional[Dict[str, Any]]:
    """Nested dictionary view of a breeding tree for rendering layers."""
    if node is None:
        return None
    rendered: Dict[int, Dict[str, Any]] = {}
    for visit in walk(node, TraversalOrder.PRE):
        current = visit.node
        data = {
            'species': current.species,
            'need_primary': current.need_primary,
            'need_secondary': current.need_secondary,
            'reusing': current.reusing,
            'reused_from_stock': current.reused_from_stock,
        }
        rendered[id(current)] = data
        # Keyed by role: "primary" or "secondary"
        if visit.parent is not None:
            rendered[id(visit.parent)][visit.role] = data
    return rendered[id(node)]


def _issue_to_dict(issue: PlanIssue) -> Dict[str, Any]:
    return {
        'code': issue.code,
        'severity': issue.severity.value,
        'message': issue.message,
        'species': issue.species,
        'details': dict(issue.details),
    }
