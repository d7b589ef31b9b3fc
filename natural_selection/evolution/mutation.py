"""Scheduling of user-requested ("mutation coming") mutations.

A mutation is scheduled for a gene and a fraction of the next generation's
births. Until the next generation boundary it can be cancelled; the
boundary consumes it and from then on it is irrevocable.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Mapping

from natural_selection.config.simulation_config import require_fraction
from natural_selection.exceptions import AlreadyMutatedError

if TYPE_CHECKING:
    from natural_selection.genetics.gene_pool import GenePool

logger = logging.getLogger(__name__)


class MutationScheduler:
    """Holds mutations waiting for the next generation boundary."""

    def __init__(self, gene_pool: GenePool):
        self.gene_pool = gene_pool
        self._pending: Dict[str, float] = {}

    @property
    def pending(self) -> Mapping[str, float]:
        """Read-only view of scheduled gene name -> fraction of births."""
        return MappingProxyType(self._pending)

    def schedule(self, gene_name: str, fraction: float) -> None:
        """Schedule a mutation for the next generation boundary.

        Args:
            gene_name: Gene to mutate
            fraction: Fraction of the next generation's births to mutate, in (0, 1]

        Raises:
            InvalidGenotypeError: If the gene does not exist
            InvalidConfigurationError: If fraction is outside (0, 1]
            AlreadyMutatedError: If the gene is already mutated or scheduled
        """
        gene = self.gene_pool.get(gene_name)
        require_fraction("fraction", fraction)
        if gene.is_mutated:
            raise AlreadyMutatedError(f"{gene_name} gene is already mutated")
        if gene_name in self._pending:
            raise AlreadyMutatedError(f"{gene_name} mutation is already scheduled")
        self._pending[gene_name] = float(fraction)
        logger.info("Mutation scheduled: gene=%s fraction=%.2f", gene_name, fraction)

    def cancel(self, gene_name: str) -> bool:
        """Withdraw a scheduled mutation.

        Returns:
            True if a mutation was pending for the gene
        """
        fraction = self._pending.pop(gene_name, None)
        if fraction is None:
            return False
        logger.info("Mutation cancelled: gene=%s", gene_name)
        return True

    def consume(self) -> Dict[str, float]:
        """Remove and return all scheduled mutations."""
        consumed = dict(self._pending)
        self._pending.clear()
        return consumed

    def clear(self) -> None:
        self._pending.clear()

    def __contains__(self, gene_name: object) -> bool:
        return gene_name in self._pending

    def __len__(self) -> int:
        return len(self._pending)
