"""Gene definitions with one-way mutation activation.

A gene starts with only its normal (wild type) allele. Activating the
mutation introduces the mutant allele and fixes, by coin flip, which of the
two alleles is dominant. That assignment happens exactly once per run:

    inactive (mutant_allele is None, dominance unknown)
        --activate_mutation()--> active (mutant allele exists, dominance fixed)

There is no transition back; a reset builds a fresh ``GenePool`` instead.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from natural_selection.exceptions import AlreadyMutatedError, DominanceUnknownError

if TYPE_CHECKING:
    from natural_selection.genetics.allele import Allele
    from natural_selection.genetics.genotype import AllelePair

logger = logging.getLogger(__name__)


@dataclass
class Gene:
    """One of the fixed genes carried by every bunny.

    Attributes:
        name: Gene name ("fur", "ears", "teeth")
        normal_allele: Wild type allele, always present
        dominant_abbreviation: Genotype symbol of the dominant allele, e.g. "F"
        recessive_abbreviation: Genotype symbol of the recessive allele, e.g. "f"
        mutant_allele: Mutant allele, None until the mutation is activated
        dominant_allele: None until the mutation is activated
        recessive_allele: None until the mutation is activated
    """

    name: str
    normal_allele: Allele
    dominant_abbreviation: str
    recessive_abbreviation: str
    _mutant_variant: Allele = field(repr=False)
    mutant_allele: Optional[Allele] = field(default=None, init=False)
    dominant_allele: Optional[Allele] = field(default=None, init=False)
    recessive_allele: Optional[Allele] = field(default=None, init=False)

    @property
    def is_mutated(self) -> bool:
        return self.mutant_allele is not None

    @property
    def dominance_known(self) -> bool:
        return self.dominant_allele is not None

    @property
    def mutant_variant(self) -> Allele:
        """The allele this gene mutates into, whether or not it is active yet."""
        return self._mutant_variant

    def owns(self, allele: Allele) -> bool:
        """Whether ``allele`` is one of this gene's two variants."""
        return allele == self.normal_allele or allele == self._mutant_variant

    def activate_mutation(self, rng: random.Random) -> Allele:
        """Introduce the mutant allele and assign dominance by coin flip.

        Args:
            rng: Random number generator used for the dominance draw

        Returns:
            The newly active mutant allele

        Raises:
            AlreadyMutatedError: If the mutation was already activated
        """
        if self.mutant_allele is not None:
            raise AlreadyMutatedError(f"{self.name} gene is already mutated")

        self.mutant_allele = self._mutant_variant
        if rng.random() < 0.5:
            self.dominant_allele, self.recessive_allele = self.mutant_allele, self.normal_allele
        else:
            self.dominant_allele, self.recessive_allele = self.normal_allele, self.mutant_allele

        logger.info(
            "Mutation activated: gene=%s mutant=%s dominant=%s",
            self.name,
            self.mutant_allele,
            self.dominant_allele,
        )
        return self.mutant_allele

    def phenotype_allele(self, pair: AllelePair) -> Allele:
        """Return the allele expressed by ``pair`` (standard Mendelian dominance).

        Raises:
            DominanceUnknownError: If the pair is heterozygous and dominance
                has not been assigned (an internal sequencing bug)
        """
        if pair.is_homozygous:
            return pair.father_allele
        if self.dominant_allele is None:
            raise DominanceUnknownError(
                f"{self.name} gene: heterozygous pair {pair} expressed before dominance was assigned"
            )
        return self.dominant_allele

    def abbreviation(self, allele: Allele) -> str:
        """Genotype symbol for ``allele``.

        Before dominance is known only the normal allele can occur; it is
        shown with the dominant symbol.
        """
        if self.dominant_allele is None or allele == self.dominant_allele:
            return self.dominant_abbreviation
        return self.recessive_abbreviation
