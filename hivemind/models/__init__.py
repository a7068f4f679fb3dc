"""Data models for breeding planning."""

from .species import MutationRule
from .stock import Stock
from .tree import (
    BreedingNode,
    TraversalOrder,
    Visit,
    walk,
    count_breeding_steps,
    count_nodes,
    contains,
)
from .plan import (
    Requirement,
    IssueSeverity,
    PlanIssue,
    BreedingStep,
    BreedingPlan,
    node_to_dict,
)

__all__ = [
    "MutationRule",
    "Stock",
    "BreedingNode",
    "TraversalOrder",
    "Visit",
    "walk",
    "count_breeding_steps",
    "count_nodes",
    "contains",
    "Requirement",
    "IssueSeverity",
    "PlanIssue",
    "BreedingStep",
    "BreedingPlan",
    "node_to_dict",
]
