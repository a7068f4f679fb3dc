"""Mutation database parser for CSV and Excel files."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from ..constants import UNKNOWN_MOD
from ..graph.production_graph import ProductionGraph
from ..models.species import MutationRule

logger = logging.getLogger(__name__)

#: Mutation database shipped with the package
DEFAULT_MUTATIONS_PATH = Path(__file__).resolve().parent.parent / "data" / "mutations.csv"


class MutationParser:
    """Parser for mutation database files.

    Expected file format (CSV, or first sheet of an Excel workbook):
    - Columns:
        - species: Species produced by the mutation
        - parent1: Princess parent (primary lineage)
        - parent2: Drone parent (secondary lineage)
        - mod: Content pack that adds the mutation (optional)

    Completely blank rows are skipped. Rows are applied in file order, so a
    later row for the same species replaces an earlier one.
    """

    REQUIRED_COLUMNS = {"species", "parent1", "parent2"}
    SUPPORTED_EXTENSIONS = {".csv", ".xlsx", ".xlsm"}

    def __init__(self, file_path: Path | str):
        """Initialize parser with file path.

        Args:
            file_path: Path to mutation database file

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file extension is not supported
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if self.file_path.suffix.lower() not in self.SUPPORTED_EXTENSIONS:
            raise ValueError(
                f"Unsupported file type '{self.file_path.suffix}'. "
                f"Expected one of {sorted(self.SUPPORTED_EXTENSIONS)}"
            )

    def _read_frame(self, sheet_name: str | int = 0) -> pd.DataFrame:
        if self.file_path.suffix.lower() == ".csv":
            return pd.read_csv(self.file_path, dtype=str)
        return pd.read_excel(self.file_path, sheet_name=sheet_name, engine="openpyxl", dtype=str)

    def parse(self, sheet_name: str | int = 0) -> List[MutationRule]:
        """Parse mutation rules.

        Args:
            sheet_name: Sheet name or index for Excel files (ignored for CSV)

        Returns:
            List of MutationRule objects in file order

        Raises:
            ValueError: If required columns are missing or a row is incomplete
        """
        df = self._read_frame(sheet_name)
        df.columns = [str(col).strip().lower() for col in df.columns]

        if not self.REQUIRED_COLUMNS.issubset(df.columns):
            missing = self.REQUIRED_COLUMNS - set(df.columns)
            raise ValueError(f"Missing required columns: {sorted(missing)}")

        has_mod = "mod" in df.columns
        rules = []
        skipped = 0

        for index, row in df.iterrows():
            species = row["species"]
            parent1 = row["parent1"]
            parent2 = row["parent2"]

            if all(pd.isna(value) or not str(value).strip() for value in (species, parent1, parent2)):
                skipped += 1
                continue

            # Header is line 1 of the file
            line = index + 2
            if pd.isna(species) or not str(species).strip():
                raise ValueError(f"Row {line}: missing species name")
            if pd.isna(parent1) or pd.isna(parent2) or not str(parent1).strip() or not str(parent2).strip():
                raise ValueError(f"Row {line}: mutation for '{species}' is missing a parent")

            mod = UNKNOWN_MOD
            if has_mod and pd.notna(row["mod"]) and str(row["mod"]).strip():
                mod = str(row["mod"])

            rules.append(MutationRule(
                species=str(species),
                primary_parent=str(parent1),
                secondary_parent=str(parent2),
                mod=mod,
            ))

        if skipped:
            logger.debug(f"Skipped {skipped} blank rows in {self.file_path.name}")
        logger.info(f"Parsed {len(rules)} mutations from {self.file_path.name}")
        return rules

    def parse_graph(self, sheet_name: str | int = 0) -> ProductionGraph:
        """Parse the file straight into a ProductionGraph."""
        return ProductionGraph(self.parse(sheet_name))


def load_graph(
    file_path: Path | str,
    enabled_mods: Optional[Iterable[str]] = None,
) -> ProductionGraph:
    """
    Load a mutation database file.

    Args:
        file_path: Path to a CSV or Excel mutation database
        enabled_mods: Restrict to these mods (None keeps every rule)

    Returns:
        ProductionGraph
    """
    graph = MutationParser(file_path).parse_graph()
    if enabled_mods is not None:
        graph = graph.filter_by_mods(enabled_mods)
    return graph


def load_default_graph(enabled_mods: Optional[Iterable[str]] = None) -> ProductionGraph:
    """
    Load the mutation database shipped with the package.

    Covers Forestry, MagicBees, ExtraBees, Career Bees and MeatballCraft.

    Args:
        enabled_mods: Restrict to these mods (None keeps every rule)

    Returns:
        ProductionGraph
    """
    return load_graph(DEFAULT_MUTATIONS_PATH, enabled_mods)
