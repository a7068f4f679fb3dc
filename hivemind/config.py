"""Configuration for planning and execution runs."""

from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import (
    DEFAULT_ACCUMULATION_BUFFER,
    DEFAULT_DRONES_PER_CYCLE,
    DEFAULT_MAX_REPAIR_PASSES,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_STATUS_CHECK_INTERVAL_SECONDS,
)


@dataclass
class PlannerConfig:
    """Configuration for plan assembly.

    Attributes:
        enabled_mods: Mods whose mutations may be used (None = all loaded mods)
        max_repair_passes: Validator repair rounds before violations become fatal
    """
    enabled_mods: Optional[Tuple[str, ...]] = None
    max_repair_passes: int = DEFAULT_MAX_REPAIR_PASSES

    def __post_init__(self):
        """Validate configuration."""
        if self.max_repair_passes < 0:
            raise ValueError(
                f"max_repair_passes must be non-negative, got {self.max_repair_passes}"
            )
        if self.enabled_mods is not None:
            self.enabled_mods = tuple(self.enabled_mods)
            if not self.enabled_mods:
                raise ValueError("enabled_mods must name at least one mod (use None for all)")


@dataclass
class ExecutorConfig:
    """Configuration for plan execution.

    Attributes:
        accumulation_buffer: Extra accumulation cycles on top of a drone shortfall
        drones_per_cycle: Drones credited per accumulation cycle and per bred queen
        poll_interval_seconds: Pause/abort polling interval while waiting
        status_check_interval_seconds: Status refresh interval during long waits
    """
    accumulation_buffer: int = DEFAULT_ACCUMULATION_BUFFER
    drones_per_cycle: int = DEFAULT_DRONES_PER_CYCLE
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    status_check_interval_seconds: float = DEFAULT_STATUS_CHECK_INTERVAL_SECONDS

    def __post_init__(self):
        """Validate configuration."""
        if self.accumulation_buffer < 0:
            raise ValueError(
                f"accumulation_buffer must be non-negative, got {self.accumulation_buffer}"
            )
        if self.drones_per_cycle < 1:
            raise ValueError(
                f"drones_per_cycle must be at least 1, got {self.drones_per_cycle}"
            )
        if self.poll_interval_seconds <= 0:
            raise ValueError(
                f"poll_interval_seconds must be positive, got {self.poll_interval_seconds}"
            )
        if self.status_check_interval_seconds <= 0:
            raise ValueError(
                "status_check_interval_seconds must be positive, "
                f"got {self.status_check_interval_seconds}"
            )
