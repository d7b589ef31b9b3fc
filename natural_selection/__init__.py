"""Natural selection population-genetics engine.

A population of bunnies reproduces in discrete generations. Offspring
inherit one allele per gene from each parent, mutations can be introduced
into a fraction of births, and environmental factors (wolves, limited food,
tough food) cull the population according to its phenotypes.

Typical use::

    from natural_selection import SimulationController

    controller = SimulationController(seed=42)
    controller.start()
    controller.schedule_mutation("fur", 0.5)
    controller.advance_generations(5)
    for record in controller.history():
        print(record.generation, record.end_counts.brown_fur_count)
"""

from natural_selection.bunny_counts import BunnyCounts
from natural_selection.config.simulation_config import FoodConfig, PredationConfig, SimulationConfig
from natural_selection.entities import Bunny, DeathCause
from natural_selection.exceptions import (
    AlreadyMutatedError,
    ClockStateError,
    ConfigurationError,
    DominanceUnknownError,
    GeneticsError,
    InvalidConfigurationError,
    InvalidGenotypeError,
    InvalidParentsError,
    LifecycleError,
    NaturalSelectionError,
    OutOfOrderError,
    SimulationError,
)
from natural_selection.generation_clock import ClockState, CompletionReason, GenerationClock
from natural_selection.habitat import Habitat
from natural_selection.lineage import LineageArena, PedigreeNode
from natural_selection.population_ledger import GenerationHistory, GenerationRecord, PopulationLedger
from natural_selection.simulation import ProportionsView, SimulationController

__version__ = "0.1.0"

__all__ = [
    "AlreadyMutatedError",
    "Bunny",
    "BunnyCounts",
    "ClockState",
    "ClockStateError",
    "CompletionReason",
    "ConfigurationError",
    "DeathCause",
    "DominanceUnknownError",
    "FoodConfig",
    "GenerationClock",
    "GenerationHistory",
    "GenerationRecord",
    "GeneticsError",
    "Habitat",
    "InvalidConfigurationError",
    "InvalidGenotypeError",
    "InvalidParentsError",
    "LifecycleError",
    "LineageArena",
    "NaturalSelectionError",
    "OutOfOrderError",
    "PedigreeNode",
    "PopulationLedger",
    "PredationConfig",
    "ProportionsView",
    "SimulationConfig",
    "SimulationController",
    "SimulationError",
    "__version__",
]
