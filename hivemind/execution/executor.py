"""
Breeding plan execution.

The executor walks a breeding tree in post-order (princess lineage, then drone
lineage, then the breeding step itself) and drives caller-supplied ``breed``
and ``accumulate`` callbacks. Execution is strictly sequential: at most one
operation is outstanding at a time and the first failure aborts the whole
traversal.

Drone accounting:
- Before a breeding step, the drone requirement of its secondary parent is
  checked. A shortfall runs ``ceil(shortfall / drones_per_cycle) +
  accumulation_buffer`` accumulation cycles, each crediting
  ``drones_per_cycle`` drones.
- A breeding step consumes one drone of its secondary parent and credits
  ``drones_per_cycle`` drones of the bred species when that species is tracked.
"""

import copy
import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Union

from ..config import ExecutorConfig
from ..exceptions import ExecutionStepFailure
from ..models.plan import BreedingPlan, Requirement
from ..models.tree import BreedingNode, TraversalOrder, count_breeding_steps, walk
from .control import ExecutionControl, ExecutionStatus

logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    """Outcome of a breed or accumulate callback."""
    success: bool
    message: str = ""


StepOutcome = Union[bool, StepResult]
BreedStep = Callable[[str, str, str], StepOutcome]
AccumulateStep = Callable[[str], StepOutcome]
ProgressCallback = Callable[[int, int, str], None]
StatusCallback = Callable[[ExecutionStatus, str, Optional[str]], None]


def _as_result(outcome: StepOutcome) -> StepResult:
    if isinstance(outcome, StepResult):
        return outcome
    return StepResult(success=bool(outcome))


@dataclass
class ExecutionReport:
    """
    Record of one execution run.

    Attributes:
        total_steps: Breeding steps in the executed tree
        steps_completed: Successful breeding steps
        accumulation_cycles: Successful accumulation cycles
        bred: Species bred, in execution order
        requirements: Drone ledger at the end of the run
        failure: Failing step, if a callback reported failure
        status: Final execution status
    """
    total_steps: int = 0
    steps_completed: int = 0
    accumulation_cycles: int = 0
    bred: List[str] = field(default_factory=list)
    requirements: Dict[str, Requirement] = field(default_factory=dict)
    failure: Optional[ExecutionStepFailure] = None
    status: ExecutionStatus = ExecutionStatus.IDLE

    @property
    def success(self) -> bool:
        return self.status == ExecutionStatus.COMPLETE


class BreedingExecutor:
    """
    Drives a breeding apparatus through a breeding tree.

    Example:
        >>> executor = BreedingExecutor(on_progress=lambda cur, total, s: print(cur, total, s))
        >>> ok = executor.execute(plan.tree, plan.requirements, breed, accumulate)
        >>> executor.report.steps_completed
    """

    def __init__(
        self,
        config: Optional[ExecutorConfig] = None,
        control: Optional[ExecutionControl] = None,
        on_progress: Optional[ProgressCallback] = None,
        on_status: Optional[StatusCallback] = None,
    ):
        """
        Initialize executor.

        Args:
            config: Executor configuration (defaults to ExecutorConfig())
            control: Pause/abort control (a fresh one if not given)
            on_progress: Called with (current, total, species) after each breeding step
            on_status: Called with (status, message, species) on status changes
        """
        self.config = config or ExecutorConfig()
        self.control = control or ExecutionControl(self.config.poll_interval_seconds)
        self.on_progress = on_progress
        self.on_status = on_status
        self.report = ExecutionReport()

    def _status(self, status: ExecutionStatus, message: str, species: Optional[str] = None) -> None:
        self.report.status = status
        if self.on_status is not None:
            self.on_status(status, message, species)

    def _may_continue(self, species: str) -> bool:
        if self.control.is_paused:
            self._status(ExecutionStatus.PAUSED, "Execution paused", species)
            if self.control.check_continue():
                self._status(ExecutionStatus.WORKING, "Execution resumed", species)
        if self.control.is_aborted:
            self._status(ExecutionStatus.ABORTED, "Operation aborted by user", species)
            logger.warning(f"Execution aborted before {species}")
            return False
        return True

    def execute(
        self,
        tree: Optional[BreedingNode],
        requirements: Dict[str, Requirement],
        breed: BreedStep,
        accumulate: AccumulateStep,
    ) -> bool:
        """
        Execute a breeding tree.

        Args:
            tree: Breeding tree root (None for an empty plan)
            requirements: Species -> drone Requirement; copied, never mutated
            breed: Callback (princess species, drone species, target species)
            accumulate: Callback (drone species) running one accumulation cycle

        Returns:
            True if every breeding step succeeded, False on failure or abort

        Raises:
            Exceptions raised by the callbacks propagate unchanged.
        """
        ledger = copy.deepcopy(requirements)
        self.report = ExecutionReport(
            total_steps=count_breeding_steps(tree),
            requirements=ledger,
        )

        if tree is None:
            self._status(ExecutionStatus.COMPLETE, "Nothing to breed")
            return True

        self._status(ExecutionStatus.WORKING, "Starting breeding sequence", tree.species)
        logger.info(f"Executing {self.report.total_steps} breeding steps for {tree.species}")

        for visit in walk(tree, TraversalOrder.POST):
            node = visit.node
            if not node.has_children:
                continue
            if not self._may_continue(node.species):
                return False
            if not self._ensure_drones(node, ledger, accumulate):
                return False
            # Abort may arrive during accumulation
            if not self._may_continue(node.species):
                return False
            if not self._breed(node, ledger, breed):
                return False

        self._status(ExecutionStatus.COMPLETE, "All breeding completed successfully!", tree.species)
        logger.info(f"Breeding of {tree.species} complete ({self.report.steps_completed} steps)")
        return True

    def _ensure_drones(
        self,
        node: BreedingNode,
        ledger: Dict[str, Requirement],
        accumulate: AccumulateStep,
    ) -> bool:
        species = node.secondary.species
        requirement = ledger.get(species)
        if requirement is None or requirement.available >= requirement.needed:
            return True

        cycles = (
            math.ceil(requirement.shortfall / self.config.drones_per_cycle)
            + self.config.accumulation_buffer
        )
        logger.info(
            f"Drone shortfall for {species}: {requirement.available} available, "
            f"{requirement.needed} needed; running {cycles} accumulation cycles"
        )

        for cycle in range(1, cycles + 1):
            if not self._may_continue(species):
                return False
            self._status(
                ExecutionStatus.WAITING,
                f"Accumulation cycle {cycle}/{cycles} for {species}",
                species,
            )
            result = _as_result(accumulate(species))
            if not result.success:
                return self._fail(ExecutionStepFailure(
                    "accumulate",
                    node.species,
                    result.message or f"Accumulation cycle failed for {species}",
                    primary_parent=node.primary.species,
                    secondary_parent=species,
                    drone=species,
                ))
            requirement.available += self.config.drones_per_cycle
            self.report.accumulation_cycles += 1

        return True

    def _breed(
        self,
        node: BreedingNode,
        ledger: Dict[str, Requirement],
        breed: BreedStep,
    ) -> bool:
        princess = node.primary.species
        drone = node.secondary.species
        self._status(
            ExecutionStatus.WORKING,
            f"Breeding: {princess} + {drone} -> {node.species}",
            node.species,
        )

        result = _as_result(breed(princess, drone, node.species))
        if not result.success:
            return self._fail(ExecutionStepFailure(
                "breed",
                node.species,
                result.message or f"Could not complete breeding step for {node.species}",
                primary_parent=princess,
                secondary_parent=drone,
            ))

        consumed = ledger.get(drone)
        if consumed is not None:
            consumed.available = max(0, consumed.available - 1)
            consumed.needed = max(0, consumed.needed - 1)
        produced = ledger.get(node.species)
        if produced is not None:
            produced.available += self.config.drones_per_cycle

        self.report.steps_completed += 1
        self.report.bred.append(node.species)
        logger.info(
            f"Bred {node.species} ({self.report.steps_completed}/{self.report.total_steps})"
        )
        if self.on_progress is not None:
            self.on_progress(self.report.steps_completed, self.report.total_steps, node.species)
        return True

    def _fail(self, failure: ExecutionStepFailure) -> bool:
        self.report.failure = failure
        logger.error(failure.format_message())
        self._status(ExecutionStatus.ERROR, f"ERROR: {failure.message}", failure.species)
        return False

    def wait_for(self, seconds: float, species: Optional[str] = None) -> bool:
        """
        Block a host callback for a real-world duration (e.g. an apiary cycle).

        Reports the remaining time every ``status_check_interval_seconds`` and
        honours pause and abort.

        Args:
            seconds: Duration to wait
            species: Species being processed, for status messages

        Returns:
            False if execution was aborted during the wait
        """
        remaining = seconds
        while remaining > 0:
            self._status(ExecutionStatus.WAITING, f"{math.ceil(remaining)} seconds remaining", species)
            interval = min(self.config.status_check_interval_seconds, remaining)
            if not self.control.wait(interval):
                return False
            remaining -= interval
        return True

    def execute_plan(self, plan: BreedingPlan, breed: BreedStep, accumulate: AccumulateStep) -> bool:
        """
        Execute an assembled plan.

        Raises:
            ValueError: If the plan failed validation
        """
        if plan.plan_failed:
            raise ValueError(
                f"Plan for {plan.target} failed validation with {len(plan.errors)} errors; "
                f"refusing to execute"
            )
        return self.execute(plan.tree, plan.requirements, breed, accumulate)


def execute_plan(
    tree: Optional[BreedingNode],
    requirements: Dict[str, Requirement],
    breed: BreedStep,
    accumulate: AccumulateStep,
    config: Optional[ExecutorConfig] = None,
    control: Optional[ExecutionControl] = None,
    on_progress: Optional[ProgressCallback] = None,
    on_status: Optional[StatusCallback] = None,
) -> bool:
    """
    Convenience function to execute a breeding tree.

    Args:
        tree: Breeding tree root
        requirements: Species -> drone Requirement
        breed: Breeding callback
        accumulate: Accumulation callback
        config: Executor configuration
        control: Pause/abort control
        on_progress: Progress callback
        on_status: Status callback

    Returns:
        True if every breeding step succeeded
    """
    executor = BreedingExecutor(config, control, on_progress, on_status)
    return executor.execute(tree, requirements, breed, accumulate)
