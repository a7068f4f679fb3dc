"""Tests for stock substitution."""

from hivemind.models import Stock, node_to_dict, walk
from hivemind.planning import StockOptimizer, TreeBuilder


def _build(graph, target, stock):
    return TreeBuilder(graph).build(target, stock)


class TestStockOptimizer:
    """Tests for StockOptimizer.optimize()."""

    def test_held_princess_cuts_primary_branch(self, forestry_graph):
        """Test that a princess in stock replaces the primary lineage subtree."""
        stock = Stock.from_lists(princesses=["Common"])
        tree = _build(forestry_graph, "Cultivated", stock)

        cuts = StockOptimizer(stock).optimize(tree)

        assert cuts == 1
        assert tree.primary.reused_from_stock
        assert not tree.primary.has_children
        assert tree.secondary.has_children

    def test_role_aware(self, forestry_graph):
        """Test that a drone does not satisfy a princess requirement."""
        stock = Stock.from_lists(drones=["Common"])
        tree = _build(forestry_graph, "Cultivated", stock)

        cuts = StockOptimizer(stock).optimize(tree)

        assert cuts == 0
        assert tree.primary.has_children

    def test_held_drone_cuts_secondary_branch(self, forestry_graph):
        stock = Stock.from_lists(drones=["Modest"])
        tree = _build(forestry_graph, "Cultivated", stock)

        StockOptimizer(stock).optimize(tree)

        assert tree.secondary.reused_from_stock
        assert not tree.secondary.has_children

    def test_shallowest_cut_wins(self, forestry_graph):
        """Test that descendants of a cut node are never visited."""
        stock = Stock.from_lists(princesses=["Common", "Forest"])
        tree = _build(forestry_graph, "Cultivated", stock)

        cuts = StockOptimizer(stock).optimize(tree)

        # Common (depth 1) and the Forest under Modest; Common's own Forest is gone
        assert cuts == 2
        assert tree.secondary.primary.reused_from_stock
        assert sum(1 for v in walk(tree) if v.node.species == "Forest") == 1

    def test_root_never_cut(self, forestry_graph):
        stock = Stock.from_lists(princesses=["Cultivated"])
        tree = _build(forestry_graph, "Cultivated", stock)

        StockOptimizer(stock).optimize(tree)

        assert not tree.reused_from_stock
        assert tree.has_children

    def test_idempotent(self, forestry_graph, scenario_stock):
        """Test that re-running substitution on an optimized tree changes nothing."""
        tree = _build(forestry_graph, "Imperial", scenario_stock)
        optimizer = StockOptimizer(scenario_stock)
        optimizer.optimize(tree)
        snapshot = node_to_dict(tree)

        assert optimizer.optimize(tree) == 0
        assert node_to_dict(tree) == snapshot

    def test_optimize_branch_in_place(self, forestry_graph):
        """Test that a branch root is cut when optimized with its parent given."""
        stock = Stock.from_lists(drones=["Modest"])
        tree = _build(forestry_graph, "Cultivated", Stock())

        cuts = StockOptimizer(stock).optimize(tree.secondary, tree, "secondary")

        assert cuts == 1
        assert tree.secondary.reused_from_stock
