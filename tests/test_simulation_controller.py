"""End-to-end tests for the simulation controller."""

import pytest

from natural_selection import (
    AlreadyMutatedError,
    ClockState,
    ClockStateError,
    CompletionReason,
    DeathCause,
    FoodConfig,
    Habitat,
    InvalidConfigurationError,
    InvalidGenotypeError,
    PredationConfig,
    SimulationConfig,
    SimulationController,
)
from natural_selection.events import (
    BunnyAddedEvent,
    GenerationCompletedEvent,
    MutationActivatedEvent,
    SimulationCompletedEvent,
    SimulationResetEvent,
    SimulationStartedEvent,
)
from natural_selection.genetics import BROWN_FUR, FLOPPY_EARS, LONG_TEETH, WHITE_FUR


def run_boundaries(controller: SimulationController, count: int) -> None:
    for _ in range(count):
        assert controller.step(controller.config.seconds_per_generation)


def collect(controller: SimulationController, event_type) -> list:
    events: list = []
    controller.event_bus.subscribe(event_type, events.append)
    return events


def count_nodes(node) -> int:
    if node is None:
        return 0
    return 1 + count_nodes(node.father) + count_nodes(node.mother)


class TestStaging:
    def test_initial_state(self, controller) -> None:
        assert controller.state is ClockState.STAGED
        assert controller.current_generation == 0
        assert controller.live_counts().total_count == 2
        assert not controller.history()
        assert controller.gene_pool.dominance_summary() == {
            "fur": None,
            "ears": None,
            "teeth": None,
        }

    def test_founders_are_homozygous_normal(self, controller) -> None:
        for bunny in controller.live_bunnies():
            assert bunny.is_founder
            assert bunny.generation == 0
            assert bunny.genotype.abbreviation(controller.gene_pool) == "FFEETT"

    def test_step_while_staged_does_nothing(self, controller) -> None:
        assert controller.step(100.0) is False
        assert controller.current_generation == 0

    def test_invalid_config_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            SimulationController(SimulationConfig(litter_size=0), seed=1)


class TestStart:
    def test_start_records_founders_as_generation_zero(self, controller) -> None:
        started = collect(controller, SimulationStartedEvent)
        controller.start()

        (record,) = list(controller.history())
        assert controller.state is ClockState.ACTIVE
        assert record.generation == 0
        assert record.start_counts == record.end_counts
        assert record.start_counts.total_count == 2
        assert started == [SimulationStartedEvent(founder_count=2)]

    def test_start_twice(self, controller) -> None:
        controller.start()
        with pytest.raises(ClockStateError):
            controller.start()


class TestGenerationBoundaries:
    def test_population_doubles_without_selection(self, controller) -> None:
        controller.start()
        run_boundaries(controller, 5)

        history = list(controller.history())
        assert [record.generation for record in history] == [0, 1, 2, 3, 4, 5]
        assert [record.start_counts.total_count for record in history] == [2, 4, 8, 16, 32, 64]
        for record in history:
            assert record.end_counts == record.start_counts
        assert controller.live_counts().total_count == 64

    def test_partial_step_does_not_cross_boundary(self, controller) -> None:
        controller.start()
        assert controller.step(4.0) is False
        assert controller.step(4.0) is False
        assert controller.step(4.0) is True
        assert controller.current_generation == 1
        assert controller.clock.time_in_generation == pytest.approx(2.0)

    def test_large_step_crosses_one_boundary(self, controller) -> None:
        controller.start()
        assert controller.step(35.0) is True
        assert controller.current_generation == 1

    def test_parents_retire_at_boundary(self, controller) -> None:
        controller.start()
        founders = controller.live_bunnies()
        run_boundaries(controller, 1)

        assert all(not bunny.is_alive for bunny in founders)
        assert all(bunny.cause_of_death is DeathCause.RETIRED for bunny in founders)
        assert all(bunny.generation == 1 for bunny in controller.live_bunnies())

    def test_offspring_reference_parents(self, controller) -> None:
        controller.start()
        founder_ids = {bunny.id for bunny in controller.live_bunnies()}
        run_boundaries(controller, 1)

        for child in controller.live_bunnies():
            assert {controller.father(child).id, controller.mother(child).id} == founder_ids

    def test_generation_completed_event(self, controller) -> None:
        completed = collect(controller, GenerationCompletedEvent)
        controller.start()
        run_boundaries(controller, 2)

        assert [event.generation for event in completed] == [1, 2]
        assert completed[0].births == 4
        assert completed[0].retired == 2
        assert completed[1].start_counts.total_count == 8

    def test_same_seed_same_history(self) -> None:
        def run():
            config = SimulationConfig(
                habitat=Habitat.ARCTIC,
                predation=PredationConfig(enabled=True),
                food=FoodConfig(limited=True, tough=True, carrying_capacity=30),
            )
            controller = SimulationController(config, seed=7)
            controller.start()
            controller.schedule_mutation("fur", 0.5)
            controller.schedule_mutation("teeth", 0.25)
            controller.advance_generations(8)
            return [record.to_dict() for record in controller.history()]

        assert run() == run()


class TestMutations:
    def test_full_fraction_reaches_every_birth(self, controller) -> None:
        activations = collect(controller, MutationActivatedEvent)
        controller.start()
        controller.schedule_mutation("fur", 1.0)
        run_boundaries(controller, 1)

        offspring = controller.live_bunnies()
        assert len(offspring) == 4
        assert all(bunny.genotype.pair("fur").contains(BROWN_FUR) for bunny in offspring)
        assert all(bunny.mutated_genes == ("fur",) for bunny in offspring)
        assert len(activations) == 1
        assert activations[0].gene_name == "fur"
        assert controller.gene_pool.fur.dominance_known

    def test_mutation_applies_once(self, controller) -> None:
        controller.start()
        controller.schedule_mutation("ears", 0.5)
        run_boundaries(controller, 2)

        mutated_by_generation = {}
        for bunny in controller.arena:
            if bunny.mutated_genes:
                mutated_by_generation.setdefault(bunny.generation, 0)
                mutated_by_generation[bunny.generation] += 1
        assert mutated_by_generation == {1: 2}
        assert not controller.mutations.pending

    def test_cannot_mutate_twice(self, controller) -> None:
        controller.start()
        controller.schedule_mutation("teeth", 0.5)
        run_boundaries(controller, 1)
        with pytest.raises(AlreadyMutatedError):
            controller.schedule_mutation("teeth", 0.5)

    def test_cancel_before_boundary(self, controller) -> None:
        controller.start()
        controller.schedule_mutation("fur", 0.5)
        assert controller.cancel_scheduled_mutation("fur") is True
        run_boundaries(controller, 1)

        assert not controller.gene_pool.fur.is_mutated
        assert controller.live_counts().brown_fur_count == 0

    def test_schedule_while_staged(self, controller) -> None:
        controller.schedule_mutation("ears", 1.0)
        controller.start()
        run_boundaries(controller, 1)
        assert controller.live_counts().total_count == 4
        assert controller.gene_pool.ears.is_mutated

    def test_invalid_fraction(self, controller) -> None:
        with pytest.raises(InvalidConfigurationError):
            controller.schedule_mutation("fur", 0.0)
        with pytest.raises(InvalidGenotypeError):
            controller.schedule_mutation("tail", 0.5)


class TestSelectionInRun:
    def test_starvation_culls_down_to_capacity(self) -> None:
        config = SimulationConfig(food=FoodConfig(limited=True, carrying_capacity=10))
        controller = SimulationController(config, seed=3)
        controller.start()
        run_boundaries(controller, 5)

        for record in controller.history():
            start = record.start_counts.total_count
            end = record.end_counts.total_count
            assert end == min(start, 10)
        assert controller.live_counts().total_count == 10

    def test_wolves_never_cull_below_floor(self) -> None:
        config = SimulationConfig(predation=PredationConfig(enabled=True, cull_fraction=1.0))
        controller = SimulationController(config, seed=5)
        controller.start()
        run_boundaries(controller, 3)

        for record in list(controller.history())[1:]:
            assert record.end_counts.total_count == 2

    def test_camouflage_classifier_is_used(self) -> None:
        seen = []

        def classifier(bunny):
            seen.append(bunny.id)
            return WHITE_FUR

        config = SimulationConfig(habitat=Habitat.ARCTIC, predation=PredationConfig(enabled=True))
        controller = SimulationController(config, seed=5, camouflage_classifier=classifier)
        controller.start()
        run_boundaries(controller, 1)

        assert len(seen) == 4

    def test_toggle_factors_mid_run(self, controller) -> None:
        controller.start()
        run_boundaries(controller, 3)
        controller.set_environmental_factors(limited_food=True)
        controller.configure_selection(food={"carrying_capacity": 12})
        run_boundaries(controller, 1)

        assert controller.live_counts().total_count == 12
        stats = controller.get_stats()
        assert stats["limited_food"] is True
        assert stats["wolves"] is False

    def test_set_habitat(self, controller) -> None:
        controller.set_habitat(Habitat.ARCTIC)
        assert controller.habitat is Habitat.ARCTIC
        assert controller.selection.habitat is Habitat.ARCTIC
        with pytest.raises(InvalidConfigurationError):
            controller.set_habitat("arctic")

    def test_bad_selection_parameters_are_not_applied(self, controller) -> None:
        with pytest.raises(InvalidConfigurationError):
            controller.configure_selection(predation={"cull_fraction": 2.0})
        assert controller.selection.predation.cull_fraction == pytest.approx(0.35)

    def test_unknown_selection_parameter(self, controller) -> None:
        with pytest.raises(InvalidConfigurationError):
            controller.configure_selection(predation={"bogus": 1})
        with pytest.raises(InvalidConfigurationError):
            controller.configure_selection(food={"capacity": 10})
        assert controller.selection.food.carrying_capacity == 50

    def test_capacity_may_not_undercut_survivor_floor(self, controller) -> None:
        with pytest.raises(InvalidConfigurationError):
            controller.configure_selection(food={"limited": True, "carrying_capacity": 1})
        assert not controller.selection.food.limited

        config = SimulationConfig(
            predation=PredationConfig(min_survivors=2),
            food=FoodConfig(limited=True, carrying_capacity=1, min_survivors=2),
        )
        with pytest.raises(InvalidConfigurationError):
            SimulationController(config, seed=1)

    def test_starvation_respects_survivor_floor(self) -> None:
        config = SimulationConfig(food=FoodConfig(limited=True, carrying_capacity=2))
        controller = SimulationController(config, seed=4)
        controller.start()
        run_boundaries(controller, 3)
        assert controller.live_counts().total_count == 2


class TestTerminalOutcomes:
    def test_single_founder_goes_extinct(self) -> None:
        controller = SimulationController(SimulationConfig(founder_count=1), seed=1)
        completed = collect(controller, SimulationCompletedEvent)
        controller.start()
        run_boundaries(controller, 1)

        assert controller.state is ClockState.COMPLETED
        assert controller.completion_reason is CompletionReason.EXTINCTION
        last = list(controller.history())[-1]
        assert last.generation == 1
        assert last.start_counts.total_count == 0
        assert completed == [SimulationCompletedEvent(reason="extinction", generation=1, live_count=0)]
        assert controller.step(100.0) is False

    def test_population_ceiling(self) -> None:
        controller = SimulationController(SimulationConfig(max_population=20), seed=1)
        controller.start()
        controller.advance_generations(10)

        assert controller.completion_reason is CompletionReason.POPULATION_CEILING
        assert controller.current_generation == 4

    def test_generation_limit(self) -> None:
        controller = SimulationController(SimulationConfig(max_generations=3), seed=1)
        controller.start()
        assert controller.advance_generations(10) == 3
        assert controller.completion_reason is CompletionReason.GENERATION_LIMIT

    def test_commands_rejected_after_completion(self) -> None:
        controller = SimulationController(SimulationConfig(max_generations=1), seed=1)
        controller.start()
        controller.schedule_mutation("fur", 0.5)
        run_boundaries(controller, 1)

        with pytest.raises(ClockStateError):
            controller.schedule_mutation("ears", 0.5)
        with pytest.raises(ClockStateError):
            controller.add_bunny()


class TestAddBunny:
    def test_add_normal_mate_while_staged(self, controller) -> None:
        added = collect(controller, BunnyAddedEvent)
        bunny = controller.add_bunny()

        assert bunny.generation == 0
        assert bunny.is_founder
        assert added == [BunnyAddedEvent(bunny_id=bunny.id, generation=0)]
        controller.start()
        assert list(controller.history())[0].start_counts.total_count == 3

    def test_mutant_mate_activates_gene(self, controller) -> None:
        activations = collect(controller, MutationActivatedEvent)
        bunny = controller.add_bunny({"fur": (BROWN_FUR, WHITE_FUR), "teeth": [LONG_TEETH, LONG_TEETH]})

        assert controller.gene_pool.fur.is_mutated
        assert controller.gene_pool.teeth.is_mutated
        assert not controller.gene_pool.ears.is_mutated
        assert set(bunny.mutated_genes) == {"fur", "teeth"}
        assert [event.gene_name for event in activations] == ["fur", "teeth"]

    def test_mate_joins_current_generation(self, controller) -> None:
        controller.start()
        run_boundaries(controller, 1)
        bunny = controller.add_bunny({"ears": (FLOPPY_EARS, FLOPPY_EARS)})
        assert bunny.generation == 1

        run_boundaries(controller, 1)
        # 5 parents -> 2 pairs -> 8 births
        assert controller.live_counts().total_count == 8

    @pytest.mark.parametrize(
        "override",
        [
            {"tail": (BROWN_FUR, BROWN_FUR)},
            {"fur": (LONG_TEETH, WHITE_FUR)},
            {"fur": (BROWN_FUR,)},
        ],
    )
    def test_invalid_override(self, controller, override) -> None:
        with pytest.raises(InvalidGenotypeError):
            controller.add_bunny(override)
        assert controller.live_counts().total_count == 2
        assert not controller.gene_pool.fur.is_mutated


class TestQueries:
    def test_proportions_for_current_generation_use_live_counts(self, controller) -> None:
        controller.start()
        run_boundaries(controller, 1)
        controller.add_bunny()

        view = controller.proportions(1)
        assert view.is_current
        assert view.start_counts.total_count == 4
        assert view.end_counts.total_count == 5

    def test_proportions_for_past_generation(self, controller) -> None:
        controller.start()
        run_boundaries(controller, 2)
        view = controller.proportions(1)
        assert not view.is_current
        assert view.end_counts.total_count == 4
        assert controller.proportions(9) is None

    def test_pedigree(self, controller) -> None:
        controller.start()
        run_boundaries(controller, 2)
        grandchild = controller.live_bunnies()[0]

        tree = controller.pedigree(grandchild.id, depth=3)
        assert tree.depth() == 3
        assert tree.father.father.bunny.is_founder

    @pytest.mark.parametrize("depth", [0, 9, 40])
    def test_pedigree_depth_is_capped(self, controller, depth) -> None:
        controller.start()
        run_boundaries(controller, 1)
        with pytest.raises(InvalidConfigurationError):
            controller.pedigree(controller.live_bunnies()[0], depth)

    def test_pedigree_at_max_depth_stays_small(self, controller) -> None:
        controller.start()
        run_boundaries(controller, 10)
        tree = controller.pedigree(controller.live_bunnies()[0], 8)
        assert tree.depth() == 8
        assert count_nodes(tree) <= 2**8 - 1

    def test_get_stats(self, controller) -> None:
        controller.start()
        controller.schedule_mutation("fur", 0.5)
        stats = controller.get_stats()

        assert stats["state"] == "active"
        assert stats["generation"] == 0
        assert stats["pending_mutations"] == {"fur": 0.5}
        assert stats["live_counts"]["total_count"] == 2
        assert stats["habitat"] == "equator"


class TestReset:
    def test_reset_starts_over(self, controller) -> None:
        resets = collect(controller, SimulationResetEvent)
        controller.start()
        controller.schedule_mutation("fur", 1.0)
        run_boundaries(controller, 3)
        controller.schedule_mutation("ears", 0.5)

        controller.reset()

        assert controller.state is ClockState.STAGED
        assert controller.current_generation == 0
        assert not controller.history()
        assert controller.gene_pool.dominance_summary() == {
            "fur": None,
            "ears": None,
            "teeth": None,
        }
        assert not controller.mutations.pending
        assert controller.live_counts().total_count == 2
        assert resets == [SimulationResetEvent(previous_generation=3, previous_reason=None)]

    def test_reset_keeps_environment(self, controller) -> None:
        controller.set_habitat(Habitat.ARCTIC)
        controller.set_environmental_factors(wolves=True)
        controller.reset()
        assert controller.selection.habitat is Habitat.ARCTIC
        assert controller.selection.predation.enabled

    def test_events_still_delivered_after_reset(self, controller) -> None:
        activations = collect(controller, MutationActivatedEvent)
        controller.reset()
        controller.start()
        controller.schedule_mutation("teeth", 1.0)
        run_boundaries(controller, 1)
        assert len(activations) == 1

    def test_run_again_after_completion(self) -> None:
        controller = SimulationController(SimulationConfig(founder_count=1), seed=1)
        controller.start()
        run_boundaries(controller, 1)
        controller.reset()
        controller.start()
        assert controller.state is ClockState.ACTIVE
        assert controller.completion_reason is None
