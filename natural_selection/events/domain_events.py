"""Domain events published by the simulation controller.

Events are frozen dataclasses: facts that already happened, carrying
everything a handler needs so it never has to call back into the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from natural_selection.bunny_counts import BunnyCounts


@dataclass(frozen=True)
class SimulationStartedEvent:
    """The clock left STAGED.

    Attributes:
        founder_count: Live bunnies when the clock started
    """

    founder_count: int


@dataclass(frozen=True)
class GenerationCompletedEvent:
    """A generation boundary transition finished.

    Attributes:
        generation: The generation that was born and selected
        births: Offspring born at this boundary
        culled: Offspring killed by selection
        retired: Bunnies of earlier generations retired at this boundary
        start_counts: Counts right after birth
        end_counts: Counts after selection
    """

    generation: int
    births: int
    culled: int
    retired: int
    start_counts: BunnyCounts
    end_counts: BunnyCounts


@dataclass(frozen=True)
class MutationActivatedEvent:
    """A gene's mutant allele entered the gene pool.

    Attributes:
        gene_name: The mutated gene
        mutant_allele: Name of the new allele
        dominant_allele: Name of the allele that won the dominance coin flip
    """

    gene_name: str
    mutant_allele: str
    dominant_allele: str


@dataclass(frozen=True)
class BunnyAddedEvent:
    """A bunny was injected outside the breeding flow ("add a mate").

    Attributes:
        bunny_id: Id of the new bunny
        generation: Generation it joined
    """

    bunny_id: int
    generation: int


@dataclass(frozen=True)
class SimulationCompletedEvent:
    """The run reached a terminal outcome.

    Attributes:
        reason: "extinction", "population_ceiling" or "generation_limit"
        generation: Generation at which the run ended
        live_count: Live bunnies at the end
    """

    reason: str
    generation: int
    live_count: int


@dataclass(frozen=True)
class SimulationResetEvent:
    """The simulation returned to STAGED with a fresh population.

    Attributes:
        previous_generation: Generation reached before the reset
        previous_reason: Completion reason before the reset, if it had completed
    """

    previous_generation: int
    previous_reason: Optional[str] = None
