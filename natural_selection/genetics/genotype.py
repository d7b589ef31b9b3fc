"""Genotypes: one allele pair per gene."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterator, Mapping, Tuple

from natural_selection.exceptions import InvalidGenotypeError

if TYPE_CHECKING:
    from natural_selection.genetics.allele import Allele
    from natural_selection.genetics.gene_pool import GenePool


@dataclass(frozen=True, eq=False)
class AllelePair:
    """Two alleles for one gene, one inherited from each parent.

    The pair is unordered for comparison purposes: (B, W) == (W, B).
    The parent of origin is kept for pedigree display only.
    """

    father_allele: Allele
    mother_allele: Allele

    @classmethod
    def homozygous(cls, allele: Allele) -> "AllelePair":
        return cls(allele, allele)

    @property
    def alleles(self) -> Tuple[Allele, Allele]:
        return (self.father_allele, self.mother_allele)

    @property
    def is_homozygous(self) -> bool:
        return self.father_allele == self.mother_allele

    @property
    def is_heterozygous(self) -> bool:
        return not self.is_homozygous

    def contains(self, allele: Allele) -> bool:
        return allele in self.alleles

    def with_allele_at(self, index: int, allele: Allele) -> "AllelePair":
        """Return a copy with the father (0) or mother (1) slot replaced."""
        if index == 0:
            return AllelePair(allele, self.mother_allele)
        return AllelePair(self.father_allele, allele)

    def _key(self) -> Tuple[str, str]:
        first, second = sorted((self.father_allele.code, self.mother_allele.code))
        return (first, second)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AllelePair):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return f"{self.father_allele.code}{self.mother_allele.code}"


class Genotype:
    """Immutable mapping of gene name to ``AllelePair``.

    Always holds exactly one pair per gene of the pool it was built for.
    """

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Mapping[str, AllelePair]):
        self._pairs: Dict[str, AllelePair] = dict(pairs)

    @classmethod
    def founder(cls, gene_pool: GenePool) -> "Genotype":
        """All-normal genotype for founders."""
        return cls({gene.name: AllelePair.homozygous(gene.normal_allele) for gene in gene_pool.genes})

    def pair(self, gene_name: str) -> AllelePair:
        try:
            return self._pairs[gene_name]
        except KeyError:
            raise InvalidGenotypeError(f"genotype has no pair for gene {gene_name!r}") from None

    def gene_names(self) -> Tuple[str, ...]:
        return tuple(self._pairs)

    def replace(self, gene_name: str, pair: AllelePair) -> "Genotype":
        if gene_name not in self._pairs:
            raise InvalidGenotypeError(f"genotype has no pair for gene {gene_name!r}")
        pairs = dict(self._pairs)
        pairs[gene_name] = pair
        return Genotype(pairs)

    def phenotype(self, gene_pool: GenePool) -> Dict[str, Allele]:
        """Expressed allele for each gene."""
        return {
            gene.name: gene.phenotype_allele(self._pairs[gene.name]) for gene in gene_pool.genes
        }

    def abbreviation(self, gene_pool: GenePool) -> str:
        """Compact genotype string such as "FfEEtt"."""
        parts = []
        for gene in gene_pool.genes:
            pair = self._pairs[gene.name]
            symbols = sorted(
                (gene.abbreviation(allele) for allele in pair.alleles),
                key=lambda symbol: (symbol.islower(), symbol),
            )
            parts.append("".join(symbols))
        return "".join(parts)

    def to_dict(self) -> Dict[str, Tuple[str, str]]:
        return {name: (pair.father_allele.code, pair.mother_allele.code) for name, pair in self._pairs.items()}

    def __iter__(self) -> Iterator[Tuple[str, AllelePair]]:
        return iter(self._pairs.items())

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Genotype):
            return NotImplemented
        return self._pairs == other._pairs

    def __hash__(self) -> int:
        return hash(frozenset(self._pairs.items()))

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}={pair}" for name, pair in self._pairs.items())
        return f"Genotype({inner})"
