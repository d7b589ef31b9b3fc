"""Food-driven culling: starvation when food is limited, attrition when it is tough.

Limited food sustains at most ``carrying_capacity`` bunnies; the excess
starves. When food is also tough, bunnies with long teeth are more likely
to be among the survivors. Tough food on its own culls a fixed fraction,
again weighted against short teeth.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, List, Sequence

from natural_selection.entities.bunny import Bunny, DeathCause
from natural_selection.genetics.allele import LONG_TEETH
from natural_selection.selection.sampling import weighted_sample
from natural_selection.util.rng import round_half_up

if TYPE_CHECKING:
    from natural_selection.config.simulation_config import FoodConfig
    from natural_selection.genetics import GenePool

logger = logging.getLogger(__name__)


def _teeth_weights(bunnies: Sequence[Bunny], config: FoodConfig, gene_pool: GenePool) -> List[float]:
    teeth = gene_pool.teeth
    return [
        config.strong_teeth_cull_weight
        if teeth.phenotype_allele(bunny.genotype.pair(teeth.name)) == LONG_TEETH
        else config.weak_teeth_cull_weight
        for bunny in bunnies
    ]


def apply_starvation(
    population: Sequence[Bunny],
    config: FoodConfig,
    gene_pool: GenePool,
    rng: random.Random,
) -> List[Bunny]:
    """Cull the population down to the carrying capacity when food is limited.

    Returns:
        The bunnies that starved, already marked dead
    """
    if not config.limited:
        return []

    alive = [bunny for bunny in population if bunny.is_alive]
    excess = len(alive) - config.carrying_capacity
    if excess <= 0:
        return []

    if config.tough:
        victims = weighted_sample(alive, _teeth_weights(alive, config, gene_pool), excess, rng)
    else:
        victims = rng.sample(alive, excess)
    for bunny in victims:
        bunny.die(DeathCause.STARVATION)

    logger.debug(
        "Starvation: %d of %d bunnies starved (capacity %d, tough=%s)",
        len(victims),
        len(alive),
        config.carrying_capacity,
        config.tough,
    )
    return victims


def apply_tough_food(
    population: Sequence[Bunny],
    config: FoodConfig,
    gene_pool: GenePool,
    rng: random.Random,
) -> List[Bunny]:
    """Cull a fraction of the population when food is tough but plentiful.

    When food is limited as well, starvation already accounts for tough
    food through its teeth weighting, so this is a no-op.

    Returns:
        The bunnies that died, already marked dead
    """
    if not config.tough or config.limited:
        return []

    alive = [bunny for bunny in population if bunny.is_alive]
    target = round_half_up(config.tough_food_cull_fraction * len(alive))
    kills = max(0, min(target, len(alive) - config.min_survivors))
    if kills == 0:
        return []

    victims = weighted_sample(alive, _teeth_weights(alive, config, gene_pool), kills, rng)
    for bunny in victims:
        bunny.die(DeathCause.TOUGH_FOOD)

    logger.debug("Tough food: %d of %d bunnies died", len(victims), len(alive))
    return victims
