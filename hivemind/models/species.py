"""Mutation rule data model."""

from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import UNKNOWN_MOD


class MutationRule(BaseModel):
    """
    A single breeding mutation: princess parent + drone parent -> species.

    Attributes:
        species: Species produced by the mutation
        primary_parent: Princess lineage parent (golden path)
        secondary_parent: Drone lineage parent
        mod: Content pack that adds the mutation
    """
    model_config = ConfigDict(frozen=True)

    species: str = Field(..., min_length=1, description="Produced species")
    primary_parent: str = Field(..., min_length=1, description="Princess parent species")
    secondary_parent: str = Field(..., min_length=1, description="Drone parent species")
    mod: str = Field(default=UNKNOWN_MOD, description="Mod that adds this mutation")

    @field_validator('species', 'primary_parent', 'secondary_parent', 'mod')
    @classmethod
    def no_whitespace_only(cls, v: str) -> str:
        """Ensure names are not just whitespace."""
        if not v.strip():
            raise ValueError("Species and mod names cannot be whitespace only")
        return v.strip()

    @property
    def parents(self) -> Tuple[str, str]:
        """(primary_parent, secondary_parent) pair."""
        return (self.primary_parent, self.secondary_parent)

    def __str__(self) -> str:
        """String representation."""
        return f"{self.primary_parent} + {self.secondary_parent} -> {self.species} [{self.mod}]"
