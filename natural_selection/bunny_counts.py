"""Phenotype counts for a bunny population."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Dict, Iterable

from natural_selection.genetics.allele import (
    BROWN_FUR,
    FLOPPY_EARS,
    LONG_TEETH,
    SHORT_TEETH,
    STRAIGHT_EARS,
    WHITE_FUR,
    Allele,
)

if TYPE_CHECKING:
    from natural_selection.entities.bunny import Bunny
    from natural_selection.genetics.gene_pool import GenePool

_FIELD_BY_ALLELE: Dict[Allele, str] = {
    WHITE_FUR: "white_fur_count",
    BROWN_FUR: "brown_fur_count",
    STRAIGHT_EARS: "straight_ears_count",
    FLOPPY_EARS: "floppy_ears_count",
    SHORT_TEETH: "short_teeth_count",
    LONG_TEETH: "long_teeth_count",
}


@dataclass(frozen=True)
class BunnyCounts:
    """Immutable snapshot of how many bunnies express each allele.

    Counts are of phenotypes, not genotypes: a heterozygous bunny with
    dominant brown fur counts once, under brown fur.

    Attributes:
        total_count: Number of bunnies
        white_fur_count: Bunnies expressing white fur
        brown_fur_count: Bunnies expressing brown fur
        straight_ears_count: Bunnies expressing straight ears
        floppy_ears_count: Bunnies expressing floppy ears
        short_teeth_count: Bunnies expressing short teeth
        long_teeth_count: Bunnies expressing long teeth
    """

    total_count: int = 0
    white_fur_count: int = 0
    brown_fur_count: int = 0
    straight_ears_count: int = 0
    floppy_ears_count: int = 0
    short_teeth_count: int = 0
    long_teeth_count: int = 0

    @classmethod
    def with_zero(cls) -> "BunnyCounts":
        return cls()

    @classmethod
    def from_bunnies(cls, bunnies: Iterable[Bunny], gene_pool: GenePool) -> "BunnyCounts":
        """Count phenotypes across the alive members of ``bunnies``."""
        counts = {name: 0 for name in _FIELD_BY_ALLELE.values()}
        total = 0
        for bunny in bunnies:
            if not bunny.is_alive:
                continue
            total += 1
            for allele in bunny.phenotype(gene_pool).values():
                counts[_FIELD_BY_ALLELE[allele]] += 1
        return cls(total_count=total, **counts)

    def count_for(self, allele: Allele) -> int:
        return getattr(self, _FIELD_BY_ALLELE[allele])

    def proportion(self, allele: Allele) -> float:
        """Fraction of bunnies expressing ``allele`` (0.0 for an empty population)."""
        if self.total_count == 0:
            return 0.0
        return self.count_for(allele) / self.total_count

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
