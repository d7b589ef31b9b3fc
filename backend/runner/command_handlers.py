"""Command handlers for SimulationRunner.

Each handler runs with the runner lock held and returns a plain dict for
the API layer. Domain errors (``NaturalSelectionError``) propagate to the
caller, which maps them to HTTP responses.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from natural_selection.exceptions import InvalidConfigurationError, InvalidGenotypeError
from natural_selection.genetics import allele_from_code
from natural_selection.habitat import Habitat

if TYPE_CHECKING:
    from backend.simulation_runner import SimulationRunner

logger = logging.getLogger(__name__)


class CommandHandlerMixin:
    """Mixin class providing command handler methods for SimulationRunner."""

    def _cmd_start(self: "SimulationRunner", data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Handle 'start' command."""
        self.controller.start()
        return {"success": True, "generation": self.controller.current_generation}

    def _cmd_reset(self: "SimulationRunner", data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Handle 'reset' command."""
        self.controller.reset()
        return {"success": True}

    def _cmd_step(self: "SimulationRunner", data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Handle 'step' command."""
        dt = data.get("dt", self.controller.clock.seconds_per_generation)
        if isinstance(dt, bool) or not isinstance(dt, (int, float)):
            raise InvalidConfigurationError(f"dt must be a number, got {dt!r}")
        crossed = self.controller.step(float(dt))
        return {"success": True, "boundary_crossed": crossed}

    def _cmd_schedule_mutation(
        self: "SimulationRunner", data: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Handle 'schedule_mutation' command."""
        gene = data.get("gene")
        self.controller.schedule_mutation(gene, data.get("fraction"))
        return {"success": True, "pending_mutations": dict(self.controller.mutations.pending)}

    def _cmd_cancel_mutation(
        self: "SimulationRunner", data: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Handle 'cancel_mutation' command."""
        cancelled = self.controller.cancel_scheduled_mutation(data.get("gene"))
        return {"success": cancelled, "pending_mutations": dict(self.controller.mutations.pending)}

    def _cmd_add_bunny(self: "SimulationRunner", data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Handle 'add_bunny' command.

        The genotype arrives as allele codes and is converted to alleles here.
        """
        raw_genotype = data.get("genotype") or {}
        override = {}
        for gene_name, codes in raw_genotype.items():
            try:
                override[gene_name] = [allele_from_code(code) for code in codes]
            except KeyError as exc:
                raise InvalidGenotypeError(f"unknown allele code {exc.args[0]!r}") from exc

        bunny = self.controller.add_bunny(override)
        return {"success": True, "bunny": bunny.to_dict(self.controller.gene_pool)}

    def _cmd_set_environment(
        self: "SimulationRunner", data: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Handle 'set_environment' command."""
        habitat = data.get("habitat")
        if habitat is not None:
            try:
                habitat = Habitat(habitat)
            except ValueError as exc:
                raise InvalidConfigurationError(f"unknown habitat {habitat!r}") from exc
            self.controller.set_habitat(habitat)

        self.controller.set_environmental_factors(
            wolves=data.get("wolves"),
            limited_food=data.get("limited_food"),
            tough_food=data.get("tough_food"),
        )
        return {"success": True}
