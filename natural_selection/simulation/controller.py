"""Simulation controller - the orchestrator of one natural selection run.

The controller owns the mutable state of a run (gene pool, lineage arena,
live population, ledger, clock) and is the only thing that mutates it.
Everything happens in response to explicit calls; nothing runs in the
background.

Design Decisions:
-----------------
1. The controller is a COORDINATOR. Genetics, inheritance, selection,
   bookkeeping and timekeeping live in their own modules; the controller
   sequences them.

2. A generation boundary is ONE internal transition, ``_advance_generation``:

       breed -> clock++ -> record start -> select -> record end -> retire parents

   It is never exposed as separate steps, so the ledger can only ever see
   a start record followed by its matching end record.

3. Every random draw goes through ``self.rng``. Two controllers built with
   the same seed and driven by the same calls produce identical runs.

4. Terminal outcomes (extinction, population ceiling, generation limit)
   are published as ``SimulationCompletedEvent``; they are not errors.

The controller is not thread-safe. ``backend.simulation_runner`` shows how
to drive it from a background thread.
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from natural_selection.bunny_counts import BunnyCounts
from natural_selection.config.simulation_config import (
    SimulationConfig,
    require_pedigree_depth,
    validate_selection,
)
from natural_selection.entities.bunny import Bunny, DeathCause
from natural_selection.events import (
    BunnyAddedEvent,
    EventBus,
    GenerationCompletedEvent,
    MutationActivatedEvent,
    SimulationCompletedEvent,
    SimulationResetEvent,
    SimulationStartedEvent,
)
from natural_selection.evolution.inheritance import InheritanceEngine
from natural_selection.evolution.mutation import MutationScheduler
from natural_selection.exceptions import ClockStateError, InvalidConfigurationError, InvalidGenotypeError
from natural_selection.generation_clock import ClockState, CompletionReason, GenerationClock
from natural_selection.genetics import Allele, AllelePair, Gene, GenePool, Genotype
from natural_selection.habitat import Habitat
from natural_selection.lineage import LineageArena, PedigreeNode
from natural_selection.population_ledger import GenerationHistory, PopulationLedger
from natural_selection.selection.engine import SelectionEngine
from natural_selection.selection.predation import CamouflageClassifier

logger = logging.getLogger(__name__)

GenotypeOverride = Mapping[str, Sequence[Allele]]


@dataclass(frozen=True)
class ProportionsView:
    """Start/end counts of one generation, as shown by a proportions graph.

    For the current generation ``end_counts`` are the live counts
    ("currently") rather than a recorded snapshot.
    """

    generation: int
    start_counts: BunnyCounts
    end_counts: BunnyCounts
    is_current: bool


class SimulationController:
    """Runs a population of bunnies through generations of natural selection.

    Attributes:
        config: Configuration the run was built from
        rng: Random number generator shared by every component
        event_bus: Where lifecycle events are published
        clock: Generation clock state machine
        gene_pool: Gene registry (rebuilt on reset)
        arena: Every bunny of the run (rebuilt on reset)
        ledger: Generation history
        mutations: Scheduled mutations
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        camouflage_classifier: Optional[CamouflageClassifier] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        """Initialize the controller with a staged founder population.

        Args:
            config: Simulation configuration (defaults if None)
            rng: Shared random number generator for deterministic runs
            seed: Optional seed (used if rng is not provided)
            camouflage_classifier: Apparent fur color per bunny, supplied by
                the spatial layer (defaults to the fur phenotype)
            event_bus: Bus for lifecycle events (a private one if None)
        """
        self.config = config or SimulationConfig()
        self.config.validate()

        # RNG handling: prefer explicit rng, then seed, then fresh RNG
        if rng is not None:
            self.rng: random.Random = rng
            self.seed = None
        elif seed is not None:
            self.rng = random.Random(seed)
            self.seed = seed
        else:
            self.rng = random.Random()
            self.seed = None

        self.run_id: str = str(uuid.uuid4())
        self.event_bus = event_bus or EventBus()
        self._camouflage_classifier = camouflage_classifier

        # Environment settings survive resets; the population does not
        self._habitat: Habitat = self.config.habitat
        self._predation = replace(self.config.predation)
        self._food = replace(self.config.food)

        self.clock = GenerationClock(self.config.seconds_per_generation)
        self.ledger = PopulationLedger(self.config.history_retention, self.live_counts)
        self._build_population()

        logger.info(
            "SimulationController initialized: run_id=%s seed=%s founders=%d",
            self.run_id,
            self.seed,
            self.config.founder_count,
        )

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _build_population(self) -> None:
        self.gene_pool = GenePool(self.rng, on_mutation_activated=self._on_mutation_activated)
        self.arena = LineageArena()
        self.mutations = MutationScheduler(self.gene_pool)
        self.inheritance = InheritanceEngine(self.gene_pool, self.arena, self.rng)
        self.selection = SelectionEngine(
            self.gene_pool,
            self.rng,
            habitat=self._habitat,
            predation=self._predation,
            food=self._food,
            camouflage_classifier=self._camouflage_classifier,
        )
        founder_genotype = Genotype.founder(self.gene_pool)
        for _ in range(self.config.founder_count):
            self.arena.create(generation=0, genotype=founder_genotype)

    def _on_mutation_activated(self, gene: Gene) -> None:
        self.event_bus.emit(
            MutationActivatedEvent(
                gene_name=gene.name,
                mutant_allele=gene.mutant_allele.name,
                dominant_allele=gene.dominant_allele.name,
            )
        )

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> ClockState:
        return self.clock.state

    @property
    def current_generation(self) -> int:
        return self.clock.generation

    @property
    def completion_reason(self) -> Optional[CompletionReason]:
        return self.clock.completion_reason

    @property
    def habitat(self) -> Habitat:
        return self._habitat

    def live_bunnies(self) -> List[Bunny]:
        return self.arena.live_bunnies()

    def live_counts(self) -> BunnyCounts:
        """Counts of the current live population."""
        return BunnyCounts.from_bunnies(self.arena.live_bunnies(), self.gene_pool)

    def history(self) -> GenerationHistory:
        return self.ledger.history()

    def get_bunny(self, bunny_id: int) -> Bunny:
        """Look up any bunny of this run, alive or dead.

        Raises:
            KeyError: If no bunny has this id
        """
        return self.arena.get(bunny_id)

    def father(self, bunny: Bunny) -> Optional[Bunny]:
        return self.arena.father(bunny)

    def mother(self, bunny: Bunny) -> Optional[Bunny]:
        return self.arena.mother(bunny)

    def pedigree(self, bunny: Union[Bunny, int], depth: Optional[int] = None) -> PedigreeNode:
        """Pedigree tree of a bunny, ``depth`` levels deep (config default if None).

        Raises:
            KeyError: If no bunny has this id
            InvalidConfigurationError: If ``depth`` is outside [1, MAX_PEDIGREE_DEPTH]
        """
        if depth is None:
            depth = self.config.pedigree_depth
        require_pedigree_depth("depth", depth)
        if isinstance(bunny, int):
            bunny = self.arena.get(bunny)
        return self.arena.pedigree(bunny, depth)

    def proportions(self, generation: int) -> Optional[ProportionsView]:
        """Start/end counts for ``generation``, or None if no data is retained."""
        record = self.ledger.record_for(generation)
        if record is None:
            return None
        if generation == self.clock.generation:
            return ProportionsView(generation, record.start_counts, self.live_counts(), True)
        return ProportionsView(generation, record.start_counts, record.end_counts, False)

    def get_stats(self) -> Dict[str, Any]:
        """Summary of the run for status displays."""
        return {
            "run_id": self.run_id,
            "state": self.clock.state.value,
            "generation": self.clock.generation,
            "percent_complete": self.clock.percent_complete,
            "completion_reason": (
                self.clock.completion_reason.value if self.clock.completion_reason else None
            ),
            "live_count": self.arena.live_count(),
            "total_births": self.arena.total_births,
            "habitat": self._habitat.value,
            "wolves": self._predation.enabled,
            "limited_food": self._food.limited,
            "tough_food": self._food.tough,
            "dominance": self.gene_pool.dominance_summary(),
            "pending_mutations": dict(self.mutations.pending),
            "live_counts": self.live_counts().to_dict(),
        }

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the clock and record the founders as generation 0.

        Raises:
            ClockStateError: If the simulation is not STAGED
        """
        self.clock.start()
        counts = self.live_counts()
        self.ledger.record_start(0, counts)
        self.ledger.record_end(0, counts)
        self.event_bus.emit(SimulationStartedEvent(founder_count=counts.total_count))
        self._check_terminal()

    def step(self, dt: float) -> bool:
        """Advance the clock by ``dt`` seconds.

        At most one generation boundary is processed per call.

        Returns:
            True if a generation boundary transition ran
        """
        if not self.clock.advance(dt):
            return False
        self._advance_generation()
        return True

    def advance_generations(self, count: int) -> int:
        """Step through up to ``count`` generation boundaries.

        Stops early if the run completes.

        Returns:
            Number of boundaries processed
        """
        processed = 0
        for _ in range(count):
            if not self.clock.is_running:
                break
            if self.step(self.clock.seconds_per_generation):
                processed += 1
        return processed

    def schedule_mutation(self, gene_name: str, fraction_of_births: float) -> None:
        """Schedule a mutation for the next generation boundary.

        Raises:
            ClockStateError: If the simulation has completed
            InvalidGenotypeError: If the gene does not exist
            InvalidConfigurationError: If the fraction is outside (0, 1]
            AlreadyMutatedError: If the gene is already mutated or scheduled
        """
        self._require_not_completed("schedule a mutation")
        self.mutations.schedule(gene_name, fraction_of_births)

    def cancel_scheduled_mutation(self, gene_name: str) -> bool:
        """Withdraw a scheduled mutation that has not been applied yet."""
        return self.mutations.cancel(gene_name)

    def add_bunny(self, genotype_override: Optional[GenotypeOverride] = None) -> Bunny:
        """Inject one bunny into the current generation ("add a mate").

        Args:
            genotype_override: Gene name -> two alleles. Genes not listed are
                homozygous normal. A mutant allele activates its gene's
                mutation (and assigns dominance) if it is not active yet.

        Returns:
            The new bunny

        Raises:
            ClockStateError: If the simulation has completed
            InvalidGenotypeError: On unknown genes, foreign alleles or wrong pair sizes
        """
        self._require_not_completed("add a bunny")
        override = dict(genotype_override or {})
        unknown = set(override) - {gene.name for gene in self.gene_pool.genes}
        if unknown:
            raise InvalidGenotypeError(f"unknown genes in genotype override: {sorted(unknown)}")

        pairs: Dict[str, AllelePair] = {}
        for gene in self.gene_pool.genes:
            alleles = override.get(gene.name)
            if alleles is None:
                pairs[gene.name] = AllelePair.homozygous(gene.normal_allele)
                continue
            if len(alleles) != 2:
                raise InvalidGenotypeError(f"{gene.name}: expected 2 alleles, got {len(alleles)}")
            for allele in alleles:
                if not gene.owns(allele):
                    raise InvalidGenotypeError(f"{allele} is not an allele of the {gene.name} gene")
            pairs[gene.name] = AllelePair(alleles[0], alleles[1])

        mutated_genes = []
        for gene in self.gene_pool.genes:
            if pairs[gene.name].contains(gene.mutant_variant):
                self.gene_pool.ensure_mutation_active(gene.name)
                mutated_genes.append(gene.name)

        genotype = Genotype(pairs)
        self.gene_pool.validate_genotype(genotype)
        bunny = self.arena.create(
            generation=self.clock.generation,
            genotype=genotype,
            mutated_genes=mutated_genes,
        )
        logger.info("Bunny %d added to generation %d", bunny.id, bunny.generation)
        self.event_bus.emit(BunnyAddedEvent(bunny_id=bunny.id, generation=bunny.generation))
        return bunny

    def set_habitat(self, habitat: Habitat) -> None:
        if not isinstance(habitat, Habitat):
            raise InvalidConfigurationError(f"habitat must be a Habitat, got {habitat!r}")
        self._habitat = habitat
        self.selection.habitat = habitat

    def set_environmental_factors(
        self,
        *,
        wolves: Optional[bool] = None,
        limited_food: Optional[bool] = None,
        tough_food: Optional[bool] = None,
    ) -> None:
        """Switch environmental factors on or off; None leaves a factor unchanged."""
        if wolves is not None:
            self._predation.enabled = bool(wolves)
        if limited_food is not None:
            self._food.limited = bool(limited_food)
        if tough_food is not None:
            self._food.tough = bool(tough_food)

    def configure_selection(
        self,
        *,
        predation: Optional[Mapping[str, Any]] = None,
        food: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Change selection parameters (cull fractions, weights, capacity).

        The new values are validated before any of them is applied.

        Raises:
            InvalidConfigurationError: If a value is out of range
        """
        try:
            new_predation = replace(self._predation, **dict(predation or {}))
            new_food = replace(self._food, **dict(food or {}))
        except TypeError as exc:
            raise InvalidConfigurationError(f"Unknown selection parameter: {exc}") from exc
        validate_selection(new_predation, new_food)
        self._predation = new_predation
        self._food = new_food
        self.selection.predation = new_predation
        self.selection.food = new_food

    def reset(self) -> None:
        """Return to STAGED with a fresh founder population and gene pool."""
        previous_generation = self.clock.generation
        previous_reason = self.clock.completion_reason
        self.clock.reset()
        self.ledger.clear()
        self._build_population()
        logger.info("Simulation reset after generation %d", previous_generation)
        self.event_bus.emit(
            SimulationResetEvent(
                previous_generation=previous_generation,
                previous_reason=previous_reason.value if previous_reason else None,
            )
        )

    # ------------------------------------------------------------------
    # Generation boundary
    # ------------------------------------------------------------------

    def _advance_generation(self) -> None:
        """Run one complete generation boundary transition.

        Order: breed, increment clock, record start, select, record end,
        retire the previous generation, publish, check terminal outcomes.
        """
        # Validate before touching anything so a bad parameter cannot leave
        # the ledger with an open start record.
        self.selection.validate()

        parents = self.arena.live_bunnies()
        parent_generation = self.clock.generation
        births = (len(parents) // 2) * self.config.litter_size
        mutation_fractions = self.mutations.consume() if births else {}

        offspring = self.inheritance.breed_population(
            parents,
            mutation_fractions,
            self.config.litter_size,
            current_generation=parent_generation,
        )
        generation = self.clock.increment_generation()

        start_counts = BunnyCounts.from_bunnies(offspring, self.gene_pool)
        self.ledger.record_start(generation, start_counts)
        result = self.selection.apply(offspring)
        end_counts = BunnyCounts.from_bunnies(offspring, self.gene_pool)
        self.ledger.record_end(generation, end_counts)

        retired = 0
        for bunny in parents:
            if bunny.is_alive:
                bunny.die(DeathCause.RETIRED)
                retired += 1

        logger.debug(
            "Generation %d: births=%d culled=%d retired=%d survivors=%d",
            generation,
            len(offspring),
            result.total_culled,
            retired,
            end_counts.total_count,
        )
        self.event_bus.emit(
            GenerationCompletedEvent(
                generation=generation,
                births=len(offspring),
                culled=result.total_culled,
                retired=retired,
                start_counts=start_counts,
                end_counts=end_counts,
            )
        )
        self._check_terminal()

    def _check_terminal(self) -> Optional[CompletionReason]:
        live_count = self.arena.live_count()
        if live_count == 0:
            reason = CompletionReason.EXTINCTION
        elif live_count > self.config.max_population:
            reason = CompletionReason.POPULATION_CEILING
        elif self.clock.generation >= self.config.max_generations:
            reason = CompletionReason.GENERATION_LIMIT
        else:
            return None

        self.clock.complete(reason)
        self.mutations.clear()
        self.event_bus.emit(
            SimulationCompletedEvent(
                reason=reason.value,
                generation=self.clock.generation,
                live_count=live_count,
            )
        )
        return reason

    def _require_not_completed(self, action: str) -> None:
        if self.clock.state is ClockState.COMPLETED:
            raise ClockStateError(f"cannot {action}: the simulation has completed")
