"""Tests for plan assembly."""

import pytest

from hivemind.config import PlannerConfig
from hivemind.exceptions import PlanningFailure
from hivemind.models import IssueSeverity, Stock, count_breeding_steps, node_to_dict, walk
from hivemind.parsers import load_default_graph
from hivemind.planning import PlanAssembler, calculate_breeding_plan, find_impossible_parents


class TestPlanAssembler:
    """Tests for PlanAssembler.assemble()."""

    def test_target_already_held(self, forestry_graph):
        """Test that a held target short-circuits to an empty plan."""
        stock = Stock.from_lists(princesses=["Cultivated"], drones=["Cultivated"])

        plan = PlanAssembler(forestry_graph).assemble("Cultivated", stock)

        assert plan.tree is None
        assert plan.total_steps == 0
        assert plan.can_execute
        assert plan.is_empty
        assert plan.steps() == []

    def test_base_target_held(self, forestry_graph):
        stock = Stock.from_lists(princesses=["Forest"], drones=["Forest"])

        plan = PlanAssembler(forestry_graph).assemble("Forest", stock)

        assert plan.total_steps == 0

    def test_unknown_target(self, forestry_graph, empty_stock):
        with pytest.raises(PlanningFailure):
            PlanAssembler(forestry_graph).assemble("Nonexistent", empty_stock)

    def test_reuse_in_plan(self, forestry_graph, empty_stock):
        """Test that Imperial's duplicate intermediates are bred once where possible."""
        plan = PlanAssembler(forestry_graph).assemble("Imperial", empty_stock)

        assert plan.total_steps == 8
        assert not plan.plan_failed
        assert plan.missing_primary == {"Forest": 3}
        assert plan.missing_secondary == {"Meadows": 3}
        assert plan.steps()[-1].species == "Imperial"
        assert plan.steps()[-1].primary_parent == "Noble"

    def test_total_steps_counts_breeding_nodes(self, forestry_graph, scenario_stock):
        plan = PlanAssembler(forestry_graph).assemble("Majestic", scenario_stock)

        assert plan.total_steps == count_breeding_steps(plan.tree)
        assert plan.total_steps == len(plan.steps())

    def test_deterministic(self, empty_stock):
        """Test that identical inputs give structurally identical plans."""
        graph = load_default_graph()

        first = PlanAssembler(graph).assemble("Industrious", empty_stock)
        second = PlanAssembler(graph).assemble("Industrious", empty_stock)

        assert node_to_dict(first.tree) == node_to_dict(second.tree)
        assert first.total_steps == second.total_steps
        assert first.to_dict() == second.to_dict()

    def test_cycle_reported_as_warning(self, cycle_graph, empty_stock):
        plan = PlanAssembler(cycle_graph).assemble("Ghastly", empty_stock)

        cycles = [issue for issue in plan.warnings if issue.code == "cycle_break"]
        assert len(cycles) == 1
        assert cycles[0].severity == IssueSeverity.WARNING
        assert cycles[0].details == {"path": ["Ghastly", "Spiteful"]}
        assert plan.total_steps == 2
        assert plan.missing_primary == {"Ghastly": 1, "Soul": 1}
        assert plan.missing_secondary == {"Vengeful": 1}
        assert not plan.plan_failed

    def test_enabled_mods_restrict_graph(self, cycle_graph, empty_stock):
        """Test that disabling a mod turns its species into base species."""
        config = PlannerConfig(enabled_mods=["Forestry"])

        with pytest.raises(PlanningFailure):
            PlanAssembler(cycle_graph, config).assemble("Ghastly", empty_stock)

    def test_to_dict(self, forestry_graph, scenario_stock):
        plan = PlanAssembler(forestry_graph).assemble("Cultivated", scenario_stock)

        data = plan.to_dict()

        assert data['target'] == "Cultivated"
        assert data['total_steps'] == 3
        assert data['tree']['species'] == "Cultivated"
        assert data['tree']['primary']['species'] == "Common"
        assert data['steps'][0] == {
            'index': 1,
            'species': "Common",
            'primary_parent': "Forest",
            'secondary_parent': "Meadows",
        }
        assert data['requirements']['Meadows'] == {'available': 1, 'needed': 2}
        assert data['missing_primary'] == {"Forest": 1}


@pytest.mark.parametrize("target", [
    "Imperial", "Industrious", "Heroic", "Avenging", "Edenic", "Platinum", "Diamond", "Robot",
])
def test_default_database_plans_hold_invariants(target, scenario_stock):
    """Test structural invariants over real mutation chains."""
    plan = calculate_breeding_plan(target, scenario_stock)

    assert plan.total_steps == count_breeding_steps(plan.tree)
    for visit in walk(plan.tree):
        if visit.node.reusing:
            assert not visit.node.has_children
    if not plan.plan_failed:
        assert find_impossible_parents(plan.tree) == []
    for species, missing in plan.missing_primary.items():
        assert missing > 0
    for species, missing in plan.missing_secondary.items():
        assert missing > 0
