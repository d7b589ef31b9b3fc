"""The gene registry: the fixed gene set for one simulation run."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from natural_selection.exceptions import InvalidGenotypeError
from natural_selection.genetics.allele import (
    BROWN_FUR,
    FLOPPY_EARS,
    LONG_TEETH,
    SHORT_TEETH,
    STRAIGHT_EARS,
    WHITE_FUR,
    Allele,
)
from natural_selection.genetics.gene import Gene
from natural_selection.util.rng import require_rng_param

if TYPE_CHECKING:
    from natural_selection.genetics.genotype import AllelePair, Genotype

logger = logging.getLogger(__name__)

FUR = "fur"
EARS = "ears"
TEETH = "teeth"
GENE_NAMES = (FUR, EARS, TEETH)


def _create_genes() -> Tuple[Gene, ...]:
    return (
        Gene(FUR, WHITE_FUR, "F", "f", BROWN_FUR),
        Gene(EARS, STRAIGHT_EARS, "E", "e", FLOPPY_EARS),
        Gene(TEETH, SHORT_TEETH, "T", "t", LONG_TEETH),
    )


class GenePool:
    """Owns the genes and their dominance state for one run.

    The gene set is fixed (fur, ears, teeth, in that order). Each gene's
    mutation can be activated once; dominance is assigned at that moment and
    never changes. Build a new GenePool to start over.

    Attributes:
        fur: Fur color gene (white normal, brown mutant)
        ears: Ear shape gene (straight normal, floppy mutant)
        teeth: Teeth gene (short normal, long mutant)
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        on_mutation_activated: Optional[Callable[[Gene], None]] = None,
    ):
        """Initialize the gene pool.

        Args:
            rng: Random number generator for dominance coin flips
            on_mutation_activated: Callback invoked after a gene's mutation is activated
        """
        self._rng = require_rng_param(rng, "GenePool.__init__")
        self._on_mutation_activated = on_mutation_activated or (lambda gene: None)
        self.fur, self.ears, self.teeth = _create_genes()
        self._genes: Dict[str, Gene] = {gene.name: gene for gene in self.genes}

    @property
    def genes(self) -> Tuple[Gene, Gene, Gene]:
        return (self.fur, self.ears, self.teeth)

    def get(self, gene_name: str) -> Gene:
        """Look up a gene by name.

        Raises:
            InvalidGenotypeError: If the gene does not exist
        """
        try:
            return self._genes[gene_name]
        except KeyError:
            raise InvalidGenotypeError(
                f"unknown gene {gene_name!r}; expected one of {GENE_NAMES}"
            ) from None

    def gene_for_allele(self, allele: Allele) -> Gene:
        for gene in self.genes:
            if gene.owns(allele):
                return gene
        raise InvalidGenotypeError(f"allele {allele!r} belongs to no gene")

    def activate_mutation(self, gene_name: str) -> Allele:
        """Activate a gene's mutant allele, assigning dominance.

        Raises:
            AlreadyMutatedError: If the gene is already mutated
        """
        gene = self.get(gene_name)
        mutant = gene.activate_mutation(self._rng)
        self._on_mutation_activated(gene)
        return mutant

    def ensure_mutation_active(self, gene_name: str) -> Allele:
        """Return the gene's mutant allele, activating it first if needed."""
        gene = self.get(gene_name)
        if gene.mutant_allele is None:
            return self.activate_mutation(gene_name)
        return gene.mutant_allele

    def phenotype_allele(self, gene_name: str, pair: AllelePair) -> Allele:
        return self.get(gene_name).phenotype_allele(pair)

    def validate_genotype(self, genotype: Genotype) -> None:
        """Check that a genotype is legal for the current state of the pool.

        Raises:
            InvalidGenotypeError: On missing or extra genes, alleles belonging
                to another gene, or mutant alleles of inactive genes
        """
        if set(genotype.gene_names()) != set(self._genes):
            raise InvalidGenotypeError(
                f"genotype genes {sorted(genotype.gene_names())} do not match {sorted(self._genes)}"
            )
        for gene in self.genes:
            for allele in genotype.pair(gene.name).alleles:
                if not gene.owns(allele):
                    raise InvalidGenotypeError(f"{allele} is not an allele of the {gene.name} gene")
                if allele == gene.mutant_variant and not gene.is_mutated:
                    raise InvalidGenotypeError(
                        f"{allele} present before the {gene.name} mutation was activated"
                    )

    def dominance_summary(self) -> Dict[str, Optional[str]]:
        """Map each gene to the name of its dominant allele (None if unknown)."""
        return {
            gene.name: gene.dominant_allele.name if gene.dominant_allele is not None else None
            for gene in self.genes
        }
