"""Wolf predation.

Wolves eat a target fraction of the exposed population. Each bunny's cull
weight depends on whether its apparent fur color matches the habitat, so
bunnies that stand out are eaten more often. Where a bunny is sitting is
decided by the (external) spatial component, which supplies the apparent
color through a camouflage classifier.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Callable, List, Sequence

from natural_selection.entities.bunny import Bunny, DeathCause
from natural_selection.selection.sampling import weighted_sample
from natural_selection.util.rng import round_half_up

if TYPE_CHECKING:
    from natural_selection.config.simulation_config import PredationConfig
    from natural_selection.genetics import Allele, GenePool
    from natural_selection.habitat import Habitat

logger = logging.getLogger(__name__)

# Returns the fur color a predator perceives for a bunny at its current position
CamouflageClassifier = Callable[[Bunny], "Allele"]


def fur_phenotype_classifier(gene_pool: GenePool) -> CamouflageClassifier:
    """Classifier that uses the bunny's expressed fur color, ignoring position."""

    def classify(bunny: Bunny) -> Allele:
        return gene_pool.fur.phenotype_allele(bunny.genotype.pair(gene_pool.fur.name))

    return classify


def predation_kill_count(exposed: int, cull_fraction: float, min_survivors: int) -> int:
    """How many of ``exposed`` bunnies the wolves eat, respecting the survivor floor."""
    target = round_half_up(cull_fraction * exposed)
    return max(0, min(target, exposed - min_survivors))


def apply_predation(
    population: Sequence[Bunny],
    config: PredationConfig,
    habitat: Habitat,
    classifier: CamouflageClassifier,
    rng: random.Random,
) -> List[Bunny]:
    """Let the wolves hunt.

    Args:
        population: Bunnies exposed to predation (dead ones are skipped)
        config: Validated predation settings
        habitat: Current habitat
        classifier: Camouflage classifier, queried once per exposed bunny
        rng: Random number generator

    Returns:
        The bunnies eaten, already marked dead
    """
    if not config.enabled:
        return []

    exposed = [bunny for bunny in population if bunny.is_alive]
    kills = predation_kill_count(len(exposed), config.cull_fraction, config.min_survivors)
    if kills == 0:
        return []

    camouflage = habitat.camouflage_allele
    weights = [
        config.match_weight if classifier(bunny) == camouflage else config.mismatch_weight
        for bunny in exposed
    ]
    victims = weighted_sample(exposed, weights, kills, rng)
    for bunny in victims:
        bunny.die(DeathCause.PREDATION)

    logger.debug(
        "Predation: %d of %d exposed bunnies eaten in the %s habitat",
        len(victims),
        len(exposed),
        habitat.value,
    )
    return victims
