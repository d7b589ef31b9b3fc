"""Genetics: alleles, genes, the gene pool, and genotypes.

Every bunny carries the same three independent genes (fur, ears, teeth).
Each gene has a normal allele and, once activated, a mutant allele whose
dominance is decided by coin flip at activation time.
"""

from natural_selection.genetics.allele import (
    ALL_ALLELES,
    BROWN_FUR,
    FLOPPY_EARS,
    LONG_TEETH,
    SHORT_TEETH,
    STRAIGHT_EARS,
    WHITE_FUR,
    Allele,
    allele_from_code,
)
from natural_selection.genetics.gene import Gene
from natural_selection.genetics.gene_pool import EARS, FUR, GENE_NAMES, TEETH, GenePool
from natural_selection.genetics.genotype import AllelePair, Genotype

__all__ = [
    "ALL_ALLELES",
    "Allele",
    "AllelePair",
    "BROWN_FUR",
    "EARS",
    "FLOPPY_EARS",
    "FUR",
    "GENE_NAMES",
    "Gene",
    "GenePool",
    "Genotype",
    "LONG_TEETH",
    "SHORT_TEETH",
    "STRAIGHT_EARS",
    "TEETH",
    "WHITE_FUR",
    "allele_from_code",
]
