"""The bunny: per-individual genetic state, lineage links, and vital status."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from natural_selection.exceptions import LifecycleError

if TYPE_CHECKING:
    from natural_selection.genetics import Allele, GenePool, Genotype


class DeathCause(str, Enum):
    """Why a bunny stopped being alive."""

    PREDATION = "predation"
    STARVATION = "starvation"
    TOUGH_FOOD = "tough_food"
    RETIRED = "retired"


@dataclass(eq=False)
class Bunny:
    """A single bunny.

    Parents are referenced by id only; the lineage arena resolves them. A
    parent always belongs to an earlier generation than its child, so the
    lineage graph is acyclic.

    Attributes:
        id: Unique id within the arena
        generation: Generation in which the bunny was born (0 for founders)
        genotype: Allele pair for each gene
        father_id: Father's id, None for founders and injected bunnies
        mother_id: Mother's id, None for founders and injected bunnies
        mutated_genes: Genes that received a mutant allele at this birth
        is_alive: Whether the bunny is alive
        cause_of_death: Set exactly once, when the bunny dies
    """

    id: int
    generation: int
    genotype: Genotype
    father_id: Optional[int] = None
    mother_id: Optional[int] = None
    mutated_genes: Tuple[str, ...] = ()
    is_alive: bool = field(default=True, init=False)
    cause_of_death: Optional[DeathCause] = field(default=None, init=False)

    @property
    def is_founder(self) -> bool:
        return self.father_id is None and self.mother_id is None

    @property
    def is_mutant(self) -> bool:
        return bool(self.mutated_genes)

    def die(self, cause: DeathCause) -> None:
        """Mark the bunny dead.

        Raises:
            LifecycleError: If the bunny is already dead
        """
        if not self.is_alive:
            raise LifecycleError(
                f"bunny {self.id} already died ({self.cause_of_death}); cannot die of {cause}"
            )
        self.is_alive = False
        self.cause_of_death = cause

    def phenotype(self, gene_pool: GenePool) -> Dict[str, Allele]:
        return self.genotype.phenotype(gene_pool)

    def to_dict(self, gene_pool: GenePool) -> Dict[str, Any]:
        """Plain representation for pedigree and lineage payloads."""
        return {
            "id": self.id,
            "generation": self.generation,
            "father_id": self.father_id,
            "mother_id": self.mother_id,
            "is_alive": self.is_alive,
            "cause_of_death": self.cause_of_death.value if self.cause_of_death else None,
            "genotype": self.genotype.abbreviation(gene_pool),
            "phenotype": {name: allele.name for name, allele in self.phenotype(gene_pool).items()},
            "mutated_genes": list(self.mutated_genes),
        }

    def __repr__(self) -> str:
        status = "alive" if self.is_alive else f"dead:{self.cause_of_death.value}"
        return f"Bunny(id={self.id}, generation={self.generation}, {status})"
