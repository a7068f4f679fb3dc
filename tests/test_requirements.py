"""Tests for requirement aggregation."""

from hivemind.models import Requirement, Stock
from hivemind.planning import (
    PlanAssembler,
    RequirementCalculator,
    StockOptimizer,
    TreeBuilder,
    calculate_requirements,
)


class TestScenarios:
    """Requirement scenarios on small mutation graphs."""

    def test_single_mutation_fully_stocked(self, scenario_a_graph, scenario_stock):
        """Forest princess + Meadows drone cover Common exactly."""
        plan = PlanAssembler(scenario_a_graph).assemble("Common", scenario_stock)

        assert plan.tree.species == "Common"
        assert not plan.tree.primary.has_children
        assert not plan.tree.secondary.has_children
        assert plan.total_steps == 1
        assert plan.missing_primary == {}
        assert plan.missing_secondary == {}
        assert plan.can_execute

    def test_two_level_plan_with_shortfalls(self, forestry_graph, scenario_stock):
        """Cultivated needs two Forest princesses and two Meadows drones."""
        plan = PlanAssembler(forestry_graph).assemble("Cultivated", scenario_stock)

        assert plan.total_steps == 3
        assert [step.species for step in plan.steps()] == ["Common", "Modest", "Cultivated"]
        assert plan.missing_primary == {"Forest": 1}
        assert plan.missing_secondary == {"Meadows": 1}
        assert not plan.can_execute
        assert not plan.plan_failed
        # Base species are never reused
        assert all(
            not leaf.reusing
            for leaf in (plan.tree.primary.primary, plan.tree.primary.secondary,
                         plan.tree.secondary.primary, plan.tree.secondary.secondary)
        )


class TestRequirementCalculator:
    """Tests for RequirementCalculator.calculate()."""

    def test_drone_requirements_cover_secondary_roles(self, forestry_graph, scenario_stock):
        tree = TreeBuilder(forestry_graph).build("Cultivated", scenario_stock)
        StockOptimizer(scenario_stock).optimize(tree)

        summary = RequirementCalculator(scenario_stock).calculate(tree)

        assert summary.requirements == {
            "Meadows": Requirement(available=1, needed=2),
            "Modest": Requirement(available=0, needed=1),
        }

    def test_starting_primaries_in_order(self, forestry_graph, scenario_stock):
        tree = TreeBuilder(forestry_graph).build("Cultivated", scenario_stock)

        summary = calculate_requirements(tree, scenario_stock)

        assert summary.starting_primaries == ["Forest", "Forest"]

    def test_accounting_is_exact(self, forestry_graph):
        """Test that missing + held covers exactly what the tree consumes."""
        stock = Stock.from_lists(princesses=["Forest"], drones=["Meadows", "Meadows"])
        plan_tree = TreeBuilder(forestry_graph).build("Imperial", stock)
        StockOptimizer(stock).optimize(plan_tree)

        summary = RequirementCalculator(stock).calculate(plan_tree)

        for species, needed in summary.needed_primary.items():
            assert summary.missing_primary.get(species, 0) + stock.primary_count(species) >= needed
            assert summary.missing_primary.get(species, 0) == max(0, needed - stock.primary_count(species))
        for species, needed in summary.needed_secondary.items():
            assert summary.missing_secondary.get(species, 0) == max(0, needed - stock.secondary_count(species))

    def test_composite_stock_leaf_counted(self, forestry_graph):
        """Test that units cut by stock substitution are drawn from stock."""
        stock = Stock.from_lists(princesses=["Common"])
        tree = TreeBuilder(forestry_graph).build("Cultivated", stock)
        StockOptimizer(stock).optimize(tree)

        summary = RequirementCalculator(stock).calculate(tree)

        assert summary.needed_primary == {"Common": 1, "Forest": 1}
        assert summary.missing_primary == {"Forest": 1}
        assert summary.starting_primaries == ["Common", "Forest"]

    def test_cycle_leaf_reported_missing(self, cycle_graph, empty_stock):
        """Test that a composite species closing a mutation cycle is drawn from stock."""
        tree = TreeBuilder(cycle_graph).build("Ghastly", empty_stock)

        summary = RequirementCalculator(empty_stock).calculate(tree)

        assert summary.missing_primary == {"Ghastly": 1, "Soul": 1}
        assert summary.missing_secondary == {"Vengeful": 1}
        assert not summary.can_execute

    def test_empty_tree(self, empty_stock):
        summary = RequirementCalculator(empty_stock).calculate(None)

        assert summary.can_execute
        assert summary.requirements == {}
