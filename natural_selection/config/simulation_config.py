"""Simulation configuration dataclasses."""

from dataclasses import dataclass, field, replace
from typing import Any

from natural_selection.config.selection import (
    CARRYING_CAPACITY,
    MIN_SURVIVORS,
    STRONG_TEETH_CULL_WEIGHT,
    TOUGH_FOOD_CULL_FRACTION,
    WEAK_TEETH_CULL_WEIGHT,
    WOLVES_CULL_FRACTION,
    WOLVES_MATCH_WEIGHT,
    WOLVES_MISMATCH_WEIGHT,
)
from natural_selection.config.simulation import (
    FOUNDER_COUNT,
    HISTORY_RETENTION,
    LITTER_SIZE,
    MAX_GENERATIONS,
    MAX_POPULATION,
    MAX_PEDIGREE_DEPTH,
    PEDIGREE_DEPTH,
    SECONDS_PER_GENERATION,
)
from natural_selection.exceptions import InvalidConfigurationError
from natural_selection.habitat import Habitat


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def require_fraction(name: str, value: Any) -> None:
    """Raise InvalidConfigurationError unless ``value`` is in (0, 1]."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0.0 < value <= 1.0:
        raise InvalidConfigurationError(f"{name} must be in (0, 1], got {value!r}")


def require_positive_int(name: str, value: Any) -> None:
    """Raise InvalidConfigurationError unless ``value`` is an int >= 1."""
    if not _is_int(value) or value < 1:
        raise InvalidConfigurationError(f"{name} must be a positive integer, got {value!r}")


def require_non_negative_int(name: str, value: Any) -> None:
    if not _is_int(value) or value < 0:
        raise InvalidConfigurationError(f"{name} must be a non-negative integer, got {value!r}")


def require_pedigree_depth(name: str, value: Any) -> None:
    """Raise InvalidConfigurationError unless ``value`` is in [1, MAX_PEDIGREE_DEPTH]."""
    if not _is_int(value) or not 1 <= value <= MAX_PEDIGREE_DEPTH:
        raise InvalidConfigurationError(
            f"{name} must be between 1 and {MAX_PEDIGREE_DEPTH}, got {value!r}"
        )


def require_positive(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise InvalidConfigurationError(f"{name} must be positive, got {value!r}")


@dataclass
class PredationConfig:
    """Wolf predation settings.

    Attributes:
        enabled: Whether wolves hunt at generation boundaries.
        cull_fraction: Target fraction of the exposed population to eat.
        mismatch_weight: Cull weight for bunnies whose fur stands out.
        match_weight: Cull weight for camouflaged bunnies.
        min_survivors: Floor the population is never culled below.
    """

    enabled: bool = False
    cull_fraction: float = WOLVES_CULL_FRACTION
    mismatch_weight: float = WOLVES_MISMATCH_WEIGHT
    match_weight: float = WOLVES_MATCH_WEIGHT
    min_survivors: int = MIN_SURVIVORS

    def validate(self) -> None:
        require_fraction("predation.cull_fraction", self.cull_fraction)
        require_positive("predation.mismatch_weight", self.mismatch_weight)
        require_positive("predation.match_weight", self.match_weight)
        require_non_negative_int("predation.min_survivors", self.min_survivors)


@dataclass
class FoodConfig:
    """Food supply settings.

    Attributes:
        limited: Whether food is scarce (starvation above carrying capacity).
        tough: Whether food is tough (long teeth favoured).
        carrying_capacity: Population the limited food supply sustains.
        tough_food_cull_fraction: Fraction culled by tough food alone.
        strong_teeth_cull_weight: Cull weight for long-teeth bunnies on tough food.
        weak_teeth_cull_weight: Cull weight for short-teeth bunnies on tough food.
        min_survivors: Floor for tough-food culling.
    """

    limited: bool = False
    tough: bool = False
    carrying_capacity: int = CARRYING_CAPACITY
    tough_food_cull_fraction: float = TOUGH_FOOD_CULL_FRACTION
    strong_teeth_cull_weight: float = STRONG_TEETH_CULL_WEIGHT
    weak_teeth_cull_weight: float = WEAK_TEETH_CULL_WEIGHT
    min_survivors: int = MIN_SURVIVORS

    def validate(self) -> None:
        require_positive_int("food.carrying_capacity", self.carrying_capacity)
        require_fraction("food.tough_food_cull_fraction", self.tough_food_cull_fraction)
        require_positive("food.strong_teeth_cull_weight", self.strong_teeth_cull_weight)
        require_positive("food.weak_teeth_cull_weight", self.weak_teeth_cull_weight)
        require_non_negative_int("food.min_survivors", self.min_survivors)
        if self.carrying_capacity < self.min_survivors:
            raise InvalidConfigurationError(
                f"food.carrying_capacity ({self.carrying_capacity}) must be at least "
                f"food.min_survivors ({self.min_survivors})"
            )


@dataclass
class SimulationConfig:
    """Aggregate configuration for a simulation run.

    Attributes:
        habitat: Initial habitat (determines which fur color is camouflaged).
        founder_count: Bunnies created when the simulation is staged.
        litter_size: Offspring per mating pair per generation.
        seconds_per_generation: Clock time between generation boundaries.
        max_population: Live population that ends the run.
        max_generations: Generation count that ends the run.
        history_retention: Generation records kept by the ledger.
        pedigree_depth: Default depth of pedigree queries.
        predation: Wolf settings.
        food: Food settings.
    """

    habitat: Habitat = Habitat.EQUATOR
    founder_count: int = FOUNDER_COUNT
    litter_size: int = LITTER_SIZE
    seconds_per_generation: float = SECONDS_PER_GENERATION
    max_population: int = MAX_POPULATION
    max_generations: int = MAX_GENERATIONS
    history_retention: int = HISTORY_RETENTION
    pedigree_depth: int = PEDIGREE_DEPTH
    predation: PredationConfig = field(default_factory=PredationConfig)
    food: FoodConfig = field(default_factory=FoodConfig)

    def validate(self) -> None:
        """Raise InvalidConfigurationError if any value is out of range."""
        if not isinstance(self.habitat, Habitat):
            raise InvalidConfigurationError(f"habitat must be a Habitat, got {self.habitat!r}")
        require_positive_int("founder_count", self.founder_count)
        require_positive_int("litter_size", self.litter_size)
        require_positive("seconds_per_generation", self.seconds_per_generation)
        require_positive_int("max_population", self.max_population)
        require_positive_int("max_generations", self.max_generations)
        require_positive_int("history_retention", self.history_retention)
        require_pedigree_depth("pedigree_depth", self.pedigree_depth)
        validate_selection(self.predation, self.food)

    def with_overrides(self, **overrides: Any) -> "SimulationConfig":
        """Return a copy with top-level fields replaced."""
        return replace(self, **overrides)


def validate_selection(predation: PredationConfig, food: FoodConfig) -> None:
    """Validate both selection configs and the floor they share.

    Starvation always culls down to exactly the carrying capacity, so the
    capacity may not sit below either survivor floor.

    Raises:
        InvalidConfigurationError: If a value is out of range
    """
    predation.validate()
    food.validate()
    if food.carrying_capacity < predation.min_survivors:
        raise InvalidConfigurationError(
            f"food.carrying_capacity ({food.carrying_capacity}) must be at least "
            f"predation.min_survivors ({predation.min_survivors})"
        )
