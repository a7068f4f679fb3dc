"""Stock snapshot of princesses and drones available to the planner."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional


@dataclass
class Stock:
    """Point-in-time count of units held per species and role.

    Primary units are princesses or queens (the primary lineage role),
    secondary units are drones. The planner only ever reads a snapshot;
    a fresh snapshot is taken whenever the physical inventory changes.

    Attributes:
        primaries: Species -> number of princesses/queens held
        secondaries: Species -> number of drones held
    """
    primaries: Dict[str, int] = field(default_factory=dict)
    secondaries: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        """Validate counts."""
        for label, counts in (("primary", self.primaries), ("secondary", self.secondaries)):
            for species, count in counts.items():
                if count < 0:
                    raise ValueError(
                        f"Stock {label} count cannot be negative: {species}={count}"
                    )
        self.primaries = {s: c for s, c in self.primaries.items() if c > 0}
        self.secondaries = {s: c for s, c in self.secondaries.items() if c > 0}

    @classmethod
    def from_lists(
        cls,
        princesses: Optional[Iterable[str]] = None,
        drones: Optional[Iterable[str]] = None,
    ) -> "Stock":
        """Build a snapshot from one species entry per unit found by a scan.

        Args:
            princesses: Species of every princess or queen found
            drones: Species of every drone found

        Returns:
            Stock with aggregated counts
        """
        return cls(
            primaries=dict(Counter(princesses or [])),
            secondaries=dict(Counter(drones or [])),
        )

    def has_primary(self, species: str) -> bool:
        """Check if at least one princess/queen of species is held."""
        return self.primaries.get(species, 0) > 0

    def has_secondary(self, species: str) -> bool:
        """Check if at least one drone of species is held."""
        return self.secondaries.get(species, 0) > 0

    def has_both(self, species: str) -> bool:
        """Check if species is held as both princess and drone."""
        return self.has_primary(species) and self.has_secondary(species)

    def primary_count(self, species: str) -> int:
        return self.primaries.get(species, 0)

    def secondary_count(self, species: str) -> int:
        return self.secondaries.get(species, 0)

    def __str__(self) -> str:
        """String representation."""
        return (
            f"Stock({sum(self.primaries.values())} princesses, "
            f"{sum(self.secondaries.values())} drones, "
            f"{len(set(self.primaries) | set(self.secondaries))} species)"
        )
