"""Breeding plan construction, optimization and validation."""

from .tree_builder import CycleBreak, TreeBuilder
from .stock_optimizer import StockOptimizer
from .species_index import SpeciesIndex, SpeciesInfo, pre_explore
from .reuse_optimizer import ReuseOptimizer, optimize_reuse, reoptimize_branch
from .validator import (
    PlanValidator,
    ValidationResult,
    find_impossible_parents,
    find_missed_reuse,
    find_reuse_inconsistencies,
    find_unbacked_reuse,
    validate_breeding_tree,
)
from .requirements import RequirementCalculator, RequirementSummary, calculate_requirements
from .assembler import PlanAssembler, calculate_breeding_plan

__all__ = [
    "CycleBreak",
    "TreeBuilder",
    "StockOptimizer",
    "SpeciesIndex",
    "SpeciesInfo",
    "pre_explore",
    "ReuseOptimizer",
    "optimize_reuse",
    "reoptimize_branch",
    "PlanValidator",
    "ValidationResult",
    "find_impossible_parents",
    "find_missed_reuse",
    "find_reuse_inconsistencies",
    "find_unbacked_reuse",
    "validate_breeding_tree",
    "RequirementCalculator",
    "RequirementSummary",
    "calculate_requirements",
    "PlanAssembler",
    "calculate_breeding_plan",
]
