"""HiveMind bee breeding planner.

Plans and executes the breeding of a target bee species from a two-parent
mutation database: builds the full breeding tree, substitutes stock, reuses
duplicate intermediate production, validates and repairs the result, and
drives an injected breeding apparatus step by step.
"""

from .config import PlannerConfig, ExecutorConfig
from .exceptions import (
    HiveMindError,
    PlanningFailure,
    OptimizerInvariantViolation,
    ExecutionStepFailure,
)
from .graph import ProductionGraph
from .models import BreedingNode, BreedingPlan, MutationRule, Requirement, Stock
from .parsers import MutationParser, load_default_graph
from .planning import PlanAssembler, calculate_breeding_plan
from .execution import BreedingExecutor, ExecutionControl, execute_plan

__version__ = "0.3.0"

__all__ = [
    "PlannerConfig",
    "ExecutorConfig",
    "HiveMindError",
    "PlanningFailure",
    "OptimizerInvariantViolation",
    "ExecutionStepFailure",
    "ProductionGraph",
    "BreedingNode",
    "BreedingPlan",
    "MutationRule",
    "Requirement",
    "Stock",
    "MutationParser",
    "load_default_graph",
    "PlanAssembler",
    "calculate_breeding_plan",
    "BreedingExecutor",
    "ExecutionControl",
    "execute_plan",
]
