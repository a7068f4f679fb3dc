"""Exception types for planning and execution failures."""

from typing import Dict, Optional


class HiveMindError(Exception):
    """Base exception carrying a message and diagnostic context."""

    def __init__(self, message: str, context: Optional[Dict] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with context."""
        msg = self.message
        if self.context:
            msg += "\n\nContext:"
            for key, value in self.context.items():
                msg += f"\n  {key}: {value}"
        return msg


class PlanningFailure(HiveMindError):
    """Target cannot be reached from any known mutation chain."""

    def __init__(self, target: str, message: str, context: Optional[Dict] = None):
        self.target = target
        super().__init__(message, context)


class OptimizerInvariantViolation(HiveMindError):
    """An optimization pass left the breeding tree in an invalid shape.

    Attributes:
        code: Invariant that was violated (e.g. "impossible_parent")
        species: Species of the offending node
    """

    def __init__(self, code: str, species: str, message: str, context: Optional[Dict] = None):
        self.code = code
        self.species = species
        super().__init__(message, context)


class ExecutionStepFailure(HiveMindError):
    """A breeding or accumulation callback reported failure.

    Attributes:
        step_kind: "breed" or "accumulate"
        species: Species the failing step was producing
        primary_parent: Princess lineage of the failing breeding step
        secondary_parent: Drone lineage of the failing breeding step
        drone: Drone species being accumulated when an accumulation cycle failed
    """

    def __init__(
        self,
        step_kind: str,
        species: str,
        message: str,
        primary_parent: Optional[str] = None,
        secondary_parent: Optional[str] = None,
        drone: Optional[str] = None,
    ):
        self.step_kind = step_kind
        self.species = species
        self.primary_parent = primary_parent
        self.secondary_parent = secondary_parent
        self.drone = drone
        context = {"step": step_kind, "species": species}
        if primary_parent is not None:
            context["lineage"] = f"{primary_parent} + {secondary_parent}"
        if drone is not None:
            context["drone"] = drone
        super().__init__(message, context)
