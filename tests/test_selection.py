"""Tests for environmental selection: wolves, limited food and tough food."""

import random

import pytest

from natural_selection.config.simulation_config import FoodConfig, PredationConfig
from natural_selection.entities import DeathCause
from natural_selection.exceptions import InvalidConfigurationError
from natural_selection.genetics import BROWN_FUR, LONG_TEETH, SHORT_TEETH, WHITE_FUR
from natural_selection.habitat import Habitat
from natural_selection.selection import (
    SelectionEngine,
    fur_phenotype_classifier,
    predation_kill_count,
    weighted_sample,
)
from natural_selection.selection.food import apply_starvation, apply_tough_food
from natural_selection.selection.predation import apply_predation


@pytest.fixture
def mixed_fur(gene_pool, make_bunnies):
    """50 brown and 50 white bunnies."""
    gene_pool.activate_mutation("fur")
    return make_bunnies(50, fur=(BROWN_FUR, BROWN_FUR)) + make_bunnies(50, fur=(WHITE_FUR, WHITE_FUR))


@pytest.fixture
def mixed_teeth(gene_pool, make_bunnies):
    """40 long-teeth and 40 short-teeth bunnies."""
    gene_pool.activate_mutation("teeth")
    return make_bunnies(40, teeth=(LONG_TEETH, LONG_TEETH)) + make_bunnies(
        40, teeth=(SHORT_TEETH, SHORT_TEETH)
    )


def _fur_counts(bunnies, gene_pool):
    classify = fur_phenotype_classifier(gene_pool)
    brown = sum(1 for bunny in bunnies if classify(bunny) == BROWN_FUR)
    return brown, len(bunnies) - brown


class TestWeightedSample:
    def test_draws_distinct_items(self, seeded_rng) -> None:
        items = list(range(20))
        drawn = weighted_sample(items, [1.0] * 20, 10, seeded_rng)
        assert len(drawn) == 10
        assert len(set(drawn)) == 10

    def test_clamps_k(self, seeded_rng) -> None:
        assert sorted(weighted_sample(["a", "b"], [1.0, 2.0], 5, seeded_rng)) == ["a", "b"]

    def test_prefers_heavy_items(self, seeded_rng) -> None:
        hits = 0
        for _ in range(200):
            (choice,) = weighted_sample(["light", "heavy"], [1.0, 9.0], 1, seeded_rng)
            hits += choice == "heavy"
        assert hits > 150

    def test_length_mismatch(self, seeded_rng) -> None:
        with pytest.raises(ValueError):
            weighted_sample([1, 2], [1.0], 1, seeded_rng)


class TestPredation:
    @pytest.mark.parametrize(
        "exposed,fraction,floor,expected",
        [
            (100, 0.35, 2, 35),
            (10, 0.35, 2, 4),
            (3, 0.9, 2, 1),
            (2, 0.5, 2, 0),
            (0, 0.5, 2, 0),
        ],
    )
    def test_kill_count(self, exposed, fraction, floor, expected) -> None:
        assert predation_kill_count(exposed, fraction, floor) == expected

    def test_disabled_is_noop(self, mixed_fur, gene_pool, seeded_rng) -> None:
        victims = apply_predation(
            mixed_fur,
            PredationConfig(enabled=False),
            Habitat.ARCTIC,
            fur_phenotype_classifier(gene_pool),
            seeded_rng,
        )
        assert victims == []
        assert all(bunny.is_alive for bunny in mixed_fur)

    def test_wolves_favor_camouflage(self, mixed_fur, gene_pool, seeded_rng) -> None:
        victims = apply_predation(
            mixed_fur,
            PredationConfig(enabled=True),
            Habitat.ARCTIC,
            fur_phenotype_classifier(gene_pool),
            seeded_rng,
        )
        brown_eaten, white_eaten = _fur_counts(victims, gene_pool)

        assert len(victims) == 35
        assert brown_eaten > white_eaten
        assert all(bunny.cause_of_death is DeathCause.PREDATION for bunny in victims)

    def test_classifier_overrides_phenotype(self, mixed_fur, gene_pool, seeded_rng) -> None:
        queried = []

        def everyone_white(bunny):
            queried.append(bunny.id)
            return WHITE_FUR

        victims = apply_predation(
            mixed_fur, PredationConfig(enabled=True), Habitat.ARCTIC, everyone_white, seeded_rng
        )
        assert len(victims) == 35
        assert sorted(queried) == sorted(bunny.id for bunny in mixed_fur)

    def test_respects_survivor_floor(self, make_bunnies, gene_pool, seeded_rng) -> None:
        bunnies = make_bunnies(3)
        victims = apply_predation(
            bunnies,
            PredationConfig(enabled=True, cull_fraction=1.0),
            Habitat.EQUATOR,
            fur_phenotype_classifier(gene_pool),
            seeded_rng,
        )
        assert len(victims) == 1
        assert sum(bunny.is_alive for bunny in bunnies) == 2


class TestFood:
    def test_starvation_culls_exact_excess(self, make_bunnies, gene_pool, seeded_rng) -> None:
        bunnies = make_bunnies(80)
        victims = apply_starvation(
            bunnies, FoodConfig(limited=True, carrying_capacity=50), gene_pool, seeded_rng
        )
        assert len(victims) == 30
        assert sum(bunny.is_alive for bunny in bunnies) == 50
        assert all(bunny.cause_of_death is DeathCause.STARVATION for bunny in victims)

    def test_no_starvation_under_capacity(self, make_bunnies, gene_pool, seeded_rng) -> None:
        bunnies = make_bunnies(20)
        assert apply_starvation(bunnies, FoodConfig(limited=True), gene_pool, seeded_rng) == []

    def test_tough_starvation_favors_long_teeth(self, mixed_teeth, gene_pool, seeded_rng) -> None:
        victims = apply_starvation(
            mixed_teeth,
            FoodConfig(limited=True, tough=True, carrying_capacity=40),
            gene_pool,
            seeded_rng,
        )
        short_starved = sum(
            1 for bunny in victims if bunny.genotype.pair("teeth").contains(SHORT_TEETH)
        )
        assert len(victims) == 40
        assert short_starved > len(victims) - short_starved

    def test_tough_food_alone(self, mixed_teeth, gene_pool, seeded_rng) -> None:
        victims = apply_tough_food(mixed_teeth, FoodConfig(tough=True), gene_pool, seeded_rng)
        assert len(victims) == 16
        assert all(bunny.cause_of_death is DeathCause.TOUGH_FOOD for bunny in victims)

    def test_tough_food_defers_to_starvation(self, mixed_teeth, gene_pool, seeded_rng) -> None:
        config = FoodConfig(limited=True, tough=True)
        assert apply_tough_food(mixed_teeth, config, gene_pool, seeded_rng) == []


class TestSelectionEngine:
    def test_factors_run_in_order_without_double_kills(self, mixed_fur, gene_pool, seeded_rng) -> None:
        engine = SelectionEngine(
            gene_pool,
            seeded_rng,
            habitat=Habitat.EQUATOR,
            predation=PredationConfig(enabled=True),
            food=FoodConfig(limited=True, carrying_capacity=50),
        )
        result = engine.apply(mixed_fur)

        assert len(result.predation) == 35
        assert len(result.starvation) == 15
        assert result.total_culled == 50
        assert len({bunny.id for bunny in result.victims()}) == 50
        assert sum(bunny.is_alive for bunny in mixed_fur) == 50

    def test_all_factors_off(self, mixed_fur, gene_pool, seeded_rng) -> None:
        result = SelectionEngine(gene_pool, seeded_rng).apply(mixed_fur)
        assert result.total_culled == 0

    def test_invalid_parameters_leave_population_untouched(
        self, mixed_fur, gene_pool, seeded_rng
    ) -> None:
        engine = SelectionEngine(
            gene_pool,
            seeded_rng,
            predation=PredationConfig(enabled=True, cull_fraction=1.7),
        )
        with pytest.raises(InvalidConfigurationError):
            engine.apply(mixed_fur)
        assert all(bunny.is_alive for bunny in mixed_fur)

    def test_same_seed_same_victims(self, gene_pool, make_bunnies) -> None:
        gene_pool.activate_mutation("fur")
        population = make_bunnies(30, fur=(BROWN_FUR, BROWN_FUR)) + make_bunnies(30)

        def victims(seed):
            for bunny in population:
                bunny.is_alive, bunny.cause_of_death = True, None
            engine = SelectionEngine(
                gene_pool, random.Random(seed), predation=PredationConfig(enabled=True)
            )
            return [bunny.id for bunny in engine.apply(population).predation]

        assert victims(3) == victims(3)

    def test_capacity_below_survivor_floor_is_rejected(
        self, make_bunnies, gene_pool, seeded_rng
    ) -> None:
        population = make_bunnies(10)
        engine = SelectionEngine(
            gene_pool,
            seeded_rng,
            predation=PredationConfig(min_survivors=2),
            food=FoodConfig(limited=True, carrying_capacity=1, min_survivors=0),
        )
        with pytest.raises(InvalidConfigurationError):
            engine.apply(population)
        assert all(bunny.is_alive for bunny in population)
