"""RNG utilities for deterministic simulation.

Every randomized component (gene pool, inheritance, selection) takes an
explicit ``random.Random``. These helpers fail loudly when one is missing
rather than silently creating an unseeded fallback.
"""

import math
import random
from typing import Optional


class MissingRNGError(RuntimeError):
    """Raised when an RNG is required but not available.

    This indicates a bug in the simulation setup - the controller owns the
    RNG and hands it to every component it creates.
    """


def require_rng_param(rng: Optional[random.Random], context: str) -> random.Random:
    """Validate that an RNG parameter was provided, failing loudly if not.

    Args:
        rng: The RNG that should have been provided
        context: Description of where this is called from (for error messages)

    Returns:
        The validated RNG

    Raises:
        MissingRNGError: If rng is None

    Example:
        def __init__(self, rng: Optional[random.Random] = None):
            self._rng = require_rng_param(rng, "SelectionEngine.__init__")
    """
    if rng is None:
        raise MissingRNGError(
            f"RNG is required but was None (context: {context}). "
            "Pass the controller's random.Random instance explicitly."
        )
    return rng


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 rounding away from zero for positives.

    ``round()`` uses banker's rounding, which makes cull and mutation counts
    depend on the parity of the population size.
    """
    return int(math.floor(value + 0.5))
