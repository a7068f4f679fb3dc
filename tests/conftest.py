"""Pytest configuration and shared fixtures."""

import pytest

from hivemind.graph import ProductionGraph
from hivemind.models import BreedingNode, MutationRule, Stock


def _rule(species, parent1, parent2, mod="Forestry"):
    return MutationRule(species=species, primary_parent=parent1, secondary_parent=parent2, mod=mod)


@pytest.fixture
def scenario_a_graph():
    """Single mutation: Forest + Meadows -> Common."""
    return ProductionGraph([_rule("Common", "Forest", "Meadows")])


@pytest.fixture
def forestry_graph():
    """Fixture for the Forestry noble branch."""
    return ProductionGraph([
        _rule("Common", "Forest", "Meadows"),
        _rule("Modest", "Forest", "Meadows"),
        _rule("Cultivated", "Common", "Modest"),
        _rule("Noble", "Common", "Cultivated"),
        _rule("Majestic", "Noble", "Cultivated"),
        _rule("Imperial", "Noble", "Majestic"),
    ])


@pytest.fixture
def cycle_graph():
    """Mutually dependent species (Ghastly needs Spiteful needs Ghastly)."""
    return ProductionGraph([
        _rule("Ghastly", "Soul", "Spiteful", mod="MagicBees"),
        _rule("Spiteful", "Ghastly", "Vengeful", mod="MagicBees"),
    ])


@pytest.fixture
def empty_stock():
    """Fixture for an empty stock snapshot."""
    return Stock()


@pytest.fixture
def scenario_stock():
    """One Forest princess and one Meadows drone."""
    return Stock.from_lists(princesses=["Forest"], drones=["Meadows"])


@pytest.fixture
def chain_tree():
    """
    Three sequential breeding steps: A, then B from A, then C from B.

        C
        +-- B
        |   +-- A
        |   |   +-- x
        |   |   +-- y
        |   +-- z
        +-- w
    """
    a = BreedingNode("A", need_primary=True)
    a.set_children(BreedingNode("x", need_primary=True), BreedingNode("y", need_secondary=True))
    b = BreedingNode("B", need_primary=True)
    b.set_children(a, BreedingNode("z", need_secondary=True))
    c = BreedingNode("C")
    c.set_children(b, BreedingNode("w", need_secondary=True))
    return c
