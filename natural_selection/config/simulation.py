"""Population and generation-clock configuration constants.

These are tuning defaults, not part of the algorithms' contracts. Every value
can be overridden through ``SimulationConfig``.
"""

# =============================================================================
# GENERATION CLOCK
# =============================================================================
# Simulated seconds per generation. The UI drives the clock with real
# elapsed time, so this is also the wall-clock length of a generation at 1x.
SECONDS_PER_GENERATION = 10.0

# Hard stop for long runs. Every bunny ever born is kept for pedigree
# queries, so the generation count is what bounds memory.
MAX_GENERATIONS = 1000


# =============================================================================
# POPULATION
# =============================================================================
# Bunnies present when the simulation is staged
FOUNDER_COUNT = 2

# Offspring produced by each mating pair per generation
LITTER_SIZE = 4

# Live population above which "bunnies have taken over the world"
MAX_POPULATION = 2500


# =============================================================================
# HISTORY
# =============================================================================
# Generation records retained by the population ledger. Older records are
# evicted; callers needing unlimited history must persist externally.
HISTORY_RETENTION = 1000

# Default number of ancestor levels returned by pedigree queries
PEDIGREE_DEPTH = 4

# Largest pedigree depth a query may ask for. Ancestors are shared, so a
# tree of depth d has up to 2**d - 1 nodes regardless of population size.
MAX_PEDIGREE_DEPTH = 8
