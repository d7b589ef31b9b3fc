"""Lineage arena: every bunny ever born, indexed by id.

The arena only grows. Dead bunnies stay reachable so pedigree queries work
for any bunny, alive or not. Parent links are plain ids and a child's
generation is always greater than its parents', so the graph is acyclic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Sequence

from natural_selection.entities.bunny import Bunny
from natural_selection.exceptions import InvalidParentsError

if TYPE_CHECKING:
    from natural_selection.genetics import GenePool, Genotype

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PedigreeNode:
    """One node of a pedigree tree: a bunny and (optionally) its parents' subtrees."""

    bunny: Bunny
    father: Optional["PedigreeNode"] = None
    mother: Optional["PedigreeNode"] = None

    def depth(self) -> int:
        children = [node.depth() for node in (self.father, self.mother) if node is not None]
        return 1 + max(children, default=0)

    def to_dict(self, gene_pool: GenePool) -> Dict[str, Any]:
        return {
            "bunny": self.bunny.to_dict(gene_pool),
            "father": self.father.to_dict(gene_pool) if self.father else None,
            "mother": self.mother.to_dict(gene_pool) if self.mother else None,
        }


class LineageArena:
    """Owns every bunny of a run and answers lineage questions.

    Attributes:
        total_births: Number of bunnies created (founders included)
    """

    def __init__(self) -> None:
        self._bunnies: Dict[int, Bunny] = {}
        self._live: Dict[int, Bunny] = {}
        self._next_id: int = 0

    @property
    def total_births(self) -> int:
        return len(self._bunnies)

    def create(
        self,
        generation: int,
        genotype: Genotype,
        father: Optional[Bunny] = None,
        mother: Optional[Bunny] = None,
        mutated_genes: Sequence[str] = (),
    ) -> Bunny:
        """Create a bunny and add it to the arena.

        Args:
            generation: Birth generation
            genotype: The bunny's genotype
            father: Father bunny (None for founders and injected bunnies)
            mother: Mother bunny (None for founders and injected bunnies)
            mutated_genes: Genes mutated at this birth

        Raises:
            InvalidParentsError: If exactly one parent is given, or a parent
                is not from an earlier generation
        """
        if (father is None) != (mother is None):
            raise InvalidParentsError("a bunny has either two parents or none")
        for parent in (father, mother):
            if parent is not None and parent.generation >= generation:
                raise InvalidParentsError(
                    f"parent {parent.id} (generation {parent.generation}) is not older "
                    f"than child generation {generation}"
                )

        bunny = Bunny(
            id=self._next_id,
            generation=generation,
            genotype=genotype,
            father_id=father.id if father is not None else None,
            mother_id=mother.id if mother is not None else None,
            mutated_genes=tuple(mutated_genes),
        )
        self._next_id += 1
        self._bunnies[bunny.id] = bunny
        self._live[bunny.id] = bunny
        return bunny

    def get(self, bunny_id: int) -> Bunny:
        """Look up a bunny by id.

        Raises:
            KeyError: If no bunny has this id
        """
        return self._bunnies[bunny_id]

    def father(self, bunny: Bunny) -> Optional[Bunny]:
        return self._bunnies.get(bunny.father_id) if bunny.father_id is not None else None

    def mother(self, bunny: Bunny) -> Optional[Bunny]:
        return self._bunnies.get(bunny.mother_id) if bunny.mother_id is not None else None

    def live_bunnies(self) -> List[Bunny]:
        """Alive bunnies in birth order.

        Bunnies are killed through ``Bunny.die`` by the selection engine and
        the controller, so dead entries are dropped from the index lazily.
        """
        dead_ids = [bunny_id for bunny_id, bunny in self._live.items() if not bunny.is_alive]
        for bunny_id in dead_ids:
            del self._live[bunny_id]
        return list(self._live.values())

    def live_count(self) -> int:
        return len(self.live_bunnies())

    def pedigree(self, bunny: Bunny, depth: int) -> PedigreeNode:
        """Build the pedigree tree of ``bunny``.

        Args:
            bunny: Root of the tree
            depth: Number of levels, including the root (1 = just the bunny)
        """
        if depth <= 1:
            return PedigreeNode(bunny)
        father = self.father(bunny)
        mother = self.mother(bunny)
        return PedigreeNode(
            bunny,
            father=self.pedigree(father, depth - 1) if father is not None else None,
            mother=self.pedigree(mother, depth - 1) if mother is not None else None,
        )

    def get_lineage_data(self) -> List[Dict[str, Any]]:
        """Flat lineage records for phylogenetic tree rendering.

        Returns:
            One record per bunny with parent ids ("root" for founders),
            generation and alive status
        """
        return [
            {
                "id": str(bunny.id),
                "father_id": str(bunny.father_id) if bunny.father_id is not None else "root",
                "mother_id": str(bunny.mother_id) if bunny.mother_id is not None else "root",
                "generation": bunny.generation,
                "is_alive": bunny.is_alive,
                "mutated_genes": list(bunny.mutated_genes),
            }
            for bunny in self._bunnies.values()
        ]

    def __len__(self) -> int:
        return len(self._bunnies)

    def __iter__(self) -> Iterator[Bunny]:
        return iter(self._bunnies.values())

    def __contains__(self, bunny: object) -> bool:
        return isinstance(bunny, Bunny) and self._bunnies.get(bunny.id) is bunny
