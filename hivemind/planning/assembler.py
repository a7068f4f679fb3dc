"""
Breeding plan assembly.

Pipeline: build -> stock substitution -> pre-exploration -> climbing pass ->
second pass -> validation/repair -> requirements -> plan. Planning is a pure
function of (mutation graph, stock snapshot, target).
"""

import logging
from typing import Optional

from ..config import PlannerConfig
from ..graph.production_graph import ProductionGraph
from ..models.plan import BreedingPlan, IssueSeverity, PlanIssue
from ..models.stock import Stock
from ..models.tree import count_breeding_steps
from ..parsers.mutation_parser import load_default_graph
from .requirements import RequirementCalculator
from .reuse_optimizer import ReuseOptimizer
from .stock_optimizer import StockOptimizer
from .tree_builder import TreeBuilder
from .validator import PlanValidator

logger = logging.getLogger(__name__)


class PlanAssembler:
    """
    Assembles breeding plans for target species.

    Example:
        >>> assembler = PlanAssembler(load_default_graph())
        >>> plan = assembler.assemble("Cultivated", Stock.from_lists(["Forest"], ["Meadows"]))
        >>> plan.total_steps
        3
    """

    def __init__(self, graph: ProductionGraph, config: Optional[PlannerConfig] = None):
        """
        Initialize assembler.

        Args:
            graph: Mutation database
            config: Planner configuration (defaults to PlannerConfig())
        """
        self.config = config or PlannerConfig()
        if self.config.enabled_mods is not None:
            graph = graph.filter_by_mods(self.config.enabled_mods)
        self.graph = graph

    def assemble(self, target: str, stock: Stock) -> BreedingPlan:
        """
        Compute the breeding plan for a target.

        Args:
            target: Species to produce
            stock: Stock snapshot

        Returns:
            BreedingPlan

        Raises:
            PlanningFailure: If the target cannot be bred and is not fully held
        """
        if stock.has_both(target):
            logger.info(f"{target} already held as princess and drone; nothing to breed")
            return BreedingPlan(target=target)

        builder = TreeBuilder(self.graph)
        tree = builder.build(target, stock)

        cuts = StockOptimizer(stock).optimize(tree)
        ReuseOptimizer(stock).optimize(tree)
        validation = PlanValidator(builder, stock, self.config.max_repair_passes).validate(tree)
        summary = RequirementCalculator(stock).calculate(tree)

        warnings = [
            PlanIssue(
                code="cycle_break",
                severity=IssueSeverity.WARNING,
                message=f"Mutation cycle {cycle}: {cycle.species} must come from stock",
                species=cycle.species,
                details={"path": list(cycle.path)},
            )
            for cycle in builder.cycle_breaks
        ]
        warnings.extend(validation.warnings)

        plan = BreedingPlan(
            target=target,
            tree=tree,
            starting_primaries=summary.starting_primaries,
            requirements=summary.requirements,
            total_steps=count_breeding_steps(tree),
            missing_primary=summary.missing_primary,
            missing_secondary=summary.missing_secondary,
            can_execute=summary.can_execute,
            warnings=warnings,
            errors=validation.errors,
            plan_failed=validation.plan_failed,
        )

        logger.info(
            f"Plan for {target}: {plan.total_steps} breeding steps, "
            f"{cuts} stock substitutions, {validation.repairs} repairs, "
            f"can_execute={plan.can_execute}, plan_failed={plan.plan_failed}"
        )
        return plan


def calculate_breeding_plan(
    target: str,
    stock: Stock,
    graph: Optional[ProductionGraph] = None,
    config: Optional[PlannerConfig] = None,
) -> BreedingPlan:
    """
    Convenience function to compute a breeding plan.

    Args:
        target: Species to produce
        stock: Stock snapshot
        graph: Mutation database (defaults to the packaged database)
        config: Planner configuration

    Returns:
        BreedingPlan
    """
    if graph is None:
        graph = load_default_graph()
    return PlanAssembler(graph, config).assemble(target, stock)
