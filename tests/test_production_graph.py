"""Tests for the mutation graph."""

import logging

import networkx as nx

from hivemind.constants import DEFAULT_MODS
from hivemind.graph import ProductionGraph
from hivemind.models import MutationRule
from hivemind.parsers import load_default_graph


def _rule(species, parent1, parent2, mod="Forestry"):
    return MutationRule(species=species, primary_parent=parent1, secondary_parent=parent2, mod=mod)


class TestLookup:
    """Tests for species lookups."""

    def test_lookup_composite(self, forestry_graph):
        assert forestry_graph.lookup("Cultivated") == ("Common", "Modest")

    def test_lookup_base_returns_none(self, forestry_graph):
        """Test that species without a mutation are base species."""
        assert forestry_graph.lookup("Forest") is None
        assert forestry_graph.is_base("Forest")
        assert not forestry_graph.is_base("Common")

    def test_is_known(self, forestry_graph):
        assert forestry_graph.is_known("Forest")
        assert forestry_graph.is_known("Imperial")
        assert not forestry_graph.is_known("Nonexistent")
        assert "Meadows" in forestry_graph

    def test_rule(self, forestry_graph):
        rule = forestry_graph.rule("Noble")

        assert rule.species == "Noble"
        assert rule.mod == "Forestry"
        assert forestry_graph.rule("Forest") is None


class TestDuplicates:
    """Tests for duplicate mutation handling."""

    def test_last_rule_wins(self, caplog):
        """Test that a later rule for the same species replaces the earlier one."""
        with caplog.at_level(logging.WARNING, logger="hivemind.graph.production_graph"):
            graph = ProductionGraph([
                _rule("Mystical", "Noble", "Mysterious", mod="MagicBees"),
                _rule("Mystical", "Noble", "Monastic", mod="ExtraBees"),
            ])

        assert graph.lookup("Mystical") == ("Noble", "Monastic")
        assert graph.rule("Mystical").mod == "ExtraBees"
        assert len(graph) == 1
        assert "Duplicate mutation for Mystical" in caplog.text

    def test_replaced_rule_removed_from_graph(self):
        graph = ProductionGraph([_rule("Mystical", "Noble", "Mysterious")])
        assert graph.get_graph().has_edge("Mysterious", "Mystical")

        graph.add_rule(_rule("Mystical", "Noble", "Monastic"))

        assert not graph.get_graph().has_edge("Mysterious", "Mystical")
        assert graph.get_graph().has_edge("Monastic", "Mystical")


class TestAnalysis:
    """Tests for NetworkX backed analysis queries."""

    def test_graph_edges_carry_roles(self, forestry_graph):
        graph = forestry_graph.get_graph()

        assert isinstance(graph, nx.DiGraph)
        assert graph.edges["Common", "Cultivated"]["roles"] == ["primary"]
        assert graph.edges["Modest", "Cultivated"]["roles"] == ["secondary"]

    def test_same_parent_in_both_roles(self):
        """Test that a species bred from two units of one parent keeps both roles."""
        graph = ProductionGraph([_rule("Twin", "Common", "Common")])

        assert graph.get_graph().edges["Common", "Twin"]["roles"] == ["primary", "secondary"]

    def test_species_sorted(self, forestry_graph):
        species = forestry_graph.species()

        assert species == sorted(species)
        assert "Forest" in species
        assert "Imperial" in species

    def test_species_by_mod(self, cycle_graph):
        assert cycle_graph.species(mod="MagicBees") == ["Ghastly", "Spiteful"]
        assert cycle_graph.species(mod="Forestry") == []

    def test_base_species(self, forestry_graph):
        assert forestry_graph.base_species() == ["Forest", "Meadows"]

    def test_base_species_for(self, forestry_graph):
        assert forestry_graph.base_species_for("Imperial") == ["Forest", "Meadows"]
        assert forestry_graph.base_species_for("Forest") == ["Forest"]
        assert forestry_graph.base_species_for("Nonexistent") == []

    def test_find_cycles(self, cycle_graph, forestry_graph):
        assert cycle_graph.find_cycles() == [["Ghastly", "Spiteful"]]
        assert forestry_graph.find_cycles() == []

    def test_filter_by_mods(self):
        """Test that species from dropped mods become base species."""
        graph = ProductionGraph([
            _rule("Common", "Forest", "Meadows"),
            _rule("Mysterious", "Forest", "Common", mod="MagicBees"),
        ])

        filtered = graph.filter_by_mods(["Forestry"])

        assert filtered.mods() == ["Forestry"]
        assert filtered.is_base("Mysterious")
        assert not filtered.is_base("Common")
        assert len(graph) == 2


class TestDefaultDatabase:
    """Tests for the packaged mutation database."""

    def test_loads_all_mods(self):
        graph = load_default_graph()

        assert graph.mods() == sorted(DEFAULT_MODS)
        assert len(graph) == 237

    def test_known_mutations(self):
        graph = load_default_graph()

        assert graph.lookup("Imperial") == ("Noble", "Majestic")
        assert graph.lookup("Common") == ("Forest", "Meadows")
        assert graph.is_base("Forest")

    def test_later_definitions_win(self):
        """Test that species defined by several mods keep the last definition."""
        graph = load_default_graph()

        assert graph.lookup("Mystical") == ("Noble", "Monastic")
        assert graph.lookup("Unusual") == ("Secluded", "Ended")

    def test_contains_mutual_mutation_cycle(self):
        graph = load_default_graph()

        assert ["Ghastly", "Spiteful"] in graph.find_cycles()

    def test_enabled_mods(self):
        graph = load_default_graph(enabled_mods=["Forestry"])

        assert graph.mods() == ["Forestry"]
        assert graph.lookup("Imperial") == ("Noble", "Majestic")
        assert graph.is_base("Mystical")
