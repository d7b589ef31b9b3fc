"""Selection engine: applies every enabled environmental factor for one generation."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Sequence

from natural_selection.config.simulation_config import (
    FoodConfig,
    PredationConfig,
    validate_selection,
)
from natural_selection.exceptions import InvalidConfigurationError
from natural_selection.habitat import Habitat
from natural_selection.selection.food import apply_starvation, apply_tough_food
from natural_selection.selection.predation import (
    CamouflageClassifier,
    apply_predation,
    fur_phenotype_classifier,
)
from natural_selection.util.rng import require_rng_param

if TYPE_CHECKING:
    from natural_selection.entities.bunny import Bunny
    from natural_selection.genetics import GenePool

logger = logging.getLogger(__name__)


@dataclass
class SelectionResult:
    """Bunnies killed by each factor in one selection pass."""

    predation: List[Bunny] = field(default_factory=list)
    starvation: List[Bunny] = field(default_factory=list)
    tough_food: List[Bunny] = field(default_factory=list)

    @property
    def total_culled(self) -> int:
        return len(self.predation) + len(self.starvation) + len(self.tough_food)

    def victims(self) -> List[Bunny]:
        return [*self.predation, *self.starvation, *self.tough_food]


class SelectionEngine:
    """Culls a population according to the enabled environmental factors.

    Factors run in a fixed order (predation, starvation, tough food). Each
    one only considers bunnies still alive at that point, so no bunny is
    killed twice.

    Attributes:
        habitat: Current habitat
        predation: Wolf settings
        food: Food settings
    """

    def __init__(
        self,
        gene_pool: GenePool,
        rng: Optional[random.Random] = None,
        *,
        habitat: Habitat = Habitat.EQUATOR,
        predation: Optional[PredationConfig] = None,
        food: Optional[FoodConfig] = None,
        camouflage_classifier: Optional[CamouflageClassifier] = None,
    ):
        self.gene_pool = gene_pool
        self._rng = require_rng_param(rng, "SelectionEngine.__init__")
        self.habitat = habitat
        self.predation = predation or PredationConfig()
        self.food = food or FoodConfig()
        self.camouflage_classifier = camouflage_classifier or fur_phenotype_classifier(gene_pool)

    def validate(self) -> None:
        """Raise InvalidConfigurationError if any selection parameter is out of range."""
        if not isinstance(self.habitat, Habitat):
            raise InvalidConfigurationError(f"habitat must be a Habitat, got {self.habitat!r}")
        validate_selection(self.predation, self.food)

    def apply(self, population: Sequence[Bunny]) -> SelectionResult:
        """Run one selection pass over ``population``.

        All parameters are validated before anything is culled, so a
        rejected call leaves the population unchanged.

        Raises:
            InvalidConfigurationError: If a parameter is out of range
        """
        self.validate()

        result = SelectionResult()
        result.predation = apply_predation(
            population, self.predation, self.habitat, self.camouflage_classifier, self._rng
        )
        result.starvation = apply_starvation(population, self.food, self.gene_pool, self._rng)
        result.tough_food = apply_tough_food(population, self.food, self.gene_pool, self._rng)

        if result.total_culled:
            logger.debug(
                "Selection culled %d bunnies (predation=%d starvation=%d tough_food=%d)",
                result.total_culled,
                len(result.predation),
                len(result.starvation),
                len(result.tough_food),
            )
        return result
