"""Plan execution against an injected breeding apparatus."""

from .control import ExecutionControl, ExecutionStatus
from .executor import (
    BreedingExecutor,
    ExecutionReport,
    StepResult,
    execute_plan,
)

__all__ = [
    "ExecutionControl",
    "ExecutionStatus",
    "BreedingExecutor",
    "ExecutionReport",
    "StepResult",
    "execute_plan",
]
