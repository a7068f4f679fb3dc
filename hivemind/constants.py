"""Centralized constants for breeding planning and execution.

Defaults mirror the settings of the breeding apparatus the planner was first
written for. Configuration objects in ``hivemind.config`` take their defaults
from here.
"""

# ============================================================================
# UNIT ROLES
# ============================================================================

#: Role of the primary lineage parent (consumed as a princess or queen)
PRIMARY_ROLE = "primary"

#: Role of the secondary lineage parent (consumed as a drone)
SECONDARY_ROLE = "secondary"


# ============================================================================
# ACCUMULATION CONSTANTS
# ============================================================================

#: Extra accumulation cycles run on top of the computed drone shortfall
#: (``add_drone_count`` on the original apparatus)
DEFAULT_ACCUMULATION_BUFFER = 0

#: Drones credited per accumulation cycle and per bred queen
#: Conservative: one apiary run is assumed to yield at least one usable drone
DEFAULT_DRONES_PER_CYCLE = 1


# ============================================================================
# EXECUTION TIMING (seconds)
# ============================================================================

#: Interval between pause/abort polls while a step is waiting
DEFAULT_POLL_INTERVAL_SECONDS = 0.1

#: Interval between status refreshes during a long apiary wait
DEFAULT_STATUS_CHECK_INTERVAL_SECONDS = 10.0


# ============================================================================
# PLANNING CONSTANTS
# ============================================================================

#: Upper bound on validator repair rounds before remaining violations are fatal
DEFAULT_MAX_REPAIR_PASSES = 10

#: Content packs shipped in the default mutation database
DEFAULT_MODS = ("Forestry", "MagicBees", "ExtraBees", "Career Bees", "MeatballCraft")

#: Mod name assigned to rules loaded without one
UNKNOWN_MOD = "Unknown"
