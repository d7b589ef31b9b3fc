"""Environmental selection configuration constants.

Weights are relative cull weights: a bunny with weight 4.0 is four times as
likely to be picked as a victim as one with weight 1.0.
"""

# =============================================================================
# PREDATION (WOLVES)
# =============================================================================
# Fraction of the exposed population wolves try to eat each generation
WOLVES_CULL_FRACTION = 0.35

# Cull weight for bunnies whose fur does not match the habitat
WOLVES_MISMATCH_WEIGHT = 4.0

# Cull weight for camouflaged bunnies
WOLVES_MATCH_WEIGHT = 1.0

# Wolves never reduce the population below this many survivors
MIN_SURVIVORS = 2


# =============================================================================
# FOOD
# =============================================================================
# Live population the limited food supply can sustain
CARRYING_CAPACITY = 50

# Fraction of the population that starves on tough (but plentiful) food
TOUGH_FOOD_CULL_FRACTION = 0.2

# Cull weights when food is tough: long teeth survive better
STRONG_TEETH_CULL_WEIGHT = 1.0
WEAK_TEETH_CULL_WEIGHT = 3.0
