"""Mendelian inheritance: combining two parents into offspring.

For each gene independently the child receives one allele drawn uniformly
from the father's pair and one from the mother's pair (independent
assortment, no linkage). Scheduled mutations then overwrite one allele slot
of the mutated gene with the mutant allele.

Genes are always visited in gene-pool order and every random draw goes
through the injected RNG, so a fixed seed and call sequence reproduce the
same genotypes exactly.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Sequence

from natural_selection.exceptions import InvalidParentsError
from natural_selection.genetics.genotype import AllelePair, Genotype
from natural_selection.util.rng import require_rng_param, round_half_up

if TYPE_CHECKING:
    from natural_selection.entities.bunny import Bunny
    from natural_selection.genetics.gene_pool import GenePool
    from natural_selection.lineage import LineageArena

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingMutation:
    """Request to give one offspring the mutant allele of ``gene_name``."""

    gene_name: str


def mutation_birth_count(fraction: float, births: int) -> int:
    """Number of births that receive a mutation scheduled for ``fraction`` of births.

    At least one birth is mutated whenever there are births at all.
    """
    if births <= 0:
        return 0
    return min(births, max(1, round_half_up(fraction * births)))


class InheritanceEngine:
    """Breeds offspring from pairs of live parents."""

    def __init__(
        self,
        gene_pool: GenePool,
        arena: LineageArena,
        rng: Optional[random.Random] = None,
    ):
        self.gene_pool = gene_pool
        self.arena = arena
        self._rng = require_rng_param(rng, "InheritanceEngine.__init__")

    def breed(
        self,
        father: Bunny,
        mother: Bunny,
        pending_mutations: Iterable[PendingMutation] = (),
        *,
        current_generation: Optional[int] = None,
    ) -> Bunny:
        """Create one offspring of ``father`` and ``mother``.

        Args:
            father: Living parent
            mother: Living parent of the same generation
            pending_mutations: Mutations to inject into this birth
            current_generation: If given, both parents must belong to it

        Returns:
            The offspring, registered in the lineage arena

        Raises:
            InvalidParentsError: If a parent is dead, the parents are the
                same bunny, or they are from different generations
        """
        self._check_parents(father, mother, current_generation)

        pairs: Dict[str, AllelePair] = {}
        for gene in self.gene_pool.genes:
            from_father = self._rng.choice(father.genotype.pair(gene.name).alleles)
            from_mother = self._rng.choice(mother.genotype.pair(gene.name).alleles)
            pairs[gene.name] = AllelePair(from_father, from_mother)
        genotype = Genotype(pairs)

        mutated_genes: List[str] = []
        for mutation in pending_mutations:
            mutant = self.gene_pool.ensure_mutation_active(mutation.gene_name)
            slot = self._rng.randrange(2)
            pair = genotype.pair(mutation.gene_name).with_allele_at(slot, mutant)
            genotype = genotype.replace(mutation.gene_name, pair)
            mutated_genes.append(mutation.gene_name)

        return self.arena.create(
            generation=father.generation + 1,
            genotype=genotype,
            father=father,
            mother=mother,
            mutated_genes=mutated_genes,
        )

    def breed_population(
        self,
        parents: Sequence[Bunny],
        mutation_fractions: Mapping[str, float],
        litter_size: int,
        current_generation: int,
    ) -> List[Bunny]:
        """Pair up the live parents and breed a full generation.

        Parents are shuffled and paired consecutively; an odd bunny out does
        not mate. Each pair produces ``litter_size`` offspring. For every
        scheduled gene, a random subset of the births (sized by its
        fraction) receives the mutation.

        Args:
            parents: Live bunnies of the current generation
            mutation_fractions: Scheduled gene name -> fraction of births to mutate
            litter_size: Offspring per pair
            current_generation: Generation the parents belong to

        Returns:
            Offspring in birth order
        """
        shuffled = list(parents)
        self._rng.shuffle(shuffled)
        pairs = [(shuffled[i], shuffled[i + 1]) for i in range(0, len(shuffled) - 1, 2)]
        births = len(pairs) * litter_size

        per_birth: List[List[PendingMutation]] = [[] for _ in range(births)]
        for gene_name, fraction in mutation_fractions.items():
            count = mutation_birth_count(fraction, births)
            for index in self._rng.sample(range(births), count):
                per_birth[index].append(PendingMutation(gene_name))
            if count:
                logger.info(
                    "Applying %s mutation to %d of %d births in generation %d",
                    gene_name,
                    count,
                    births,
                    current_generation + 1,
                )

        offspring: List[Bunny] = []
        birth_index = 0
        for father, mother in pairs:
            for _ in range(litter_size):
                offspring.append(
                    self.breed(
                        father,
                        mother,
                        per_birth[birth_index],
                        current_generation=current_generation,
                    )
                )
                birth_index += 1

        logger.debug(
            "Bred %d offspring from %d pairs (%d parents)",
            len(offspring),
            len(pairs),
            len(parents),
        )
        return offspring

    @staticmethod
    def _check_parents(father: Bunny, mother: Bunny, current_generation: Optional[int]) -> None:
        if father is mother:
            raise InvalidParentsError(f"bunny {father.id} cannot mate with itself")
        for parent in (father, mother):
            if not parent.is_alive:
                raise InvalidParentsError(f"parent {parent.id} is dead")
        if father.generation != mother.generation:
            raise InvalidParentsError(
                f"parents are from different generations ({father.generation} and {mother.generation})"
            )
        if current_generation is not None and father.generation != current_generation:
            raise InvalidParentsError(
                f"parents are from generation {father.generation}, "
                f"current generation is {current_generation}"
            )
