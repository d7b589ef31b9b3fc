"""Pytest configuration and fixtures for natural selection tests."""

import random

import pytest


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def gene_pool(seeded_rng):
    """Fresh gene pool with no mutations activated."""
    from natural_selection.genetics import GenePool

    return GenePool(seeded_rng)


@pytest.fixture
def arena():
    from natural_selection.lineage import LineageArena

    return LineageArena()


@pytest.fixture
def controller():
    """Staged controller with default configuration and a fixed seed."""
    from natural_selection import SimulationController

    return SimulationController(seed=42)


@pytest.fixture
def make_bunnies(arena, gene_pool):
    """Factory creating live bunnies of one generation with a given genotype override."""
    from natural_selection.genetics import AllelePair, Genotype

    def _make(count, generation=0, **pairs):
        genotype = Genotype.founder(gene_pool)
        for gene_name, alleles in pairs.items():
            genotype = genotype.replace(gene_name, AllelePair(*alleles))
        return [arena.create(generation, genotype) for _ in range(count)]

    return _make
