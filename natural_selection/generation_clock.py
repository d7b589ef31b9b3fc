"""Generation clock state machine.

States:

    STAGED --start()--> ACTIVE --complete(reason)--> COMPLETED
       ^                                                 |
       +------------------- reset() ---------------------+

``reset()`` is allowed from any state. While ACTIVE, ``advance(dt)``
accumulates time and reports when a generation boundary is crossed. The
clock only keeps time; the controller performs the boundary transition and
then calls ``increment_generation()``.
"""

import logging
from enum import Enum
from typing import Optional

from natural_selection.config.simulation import SECONDS_PER_GENERATION
from natural_selection.config.simulation_config import require_positive
from natural_selection.exceptions import ClockStateError, InvalidConfigurationError

logger = logging.getLogger(__name__)


class ClockState(str, Enum):
    STAGED = "staged"
    ACTIVE = "active"
    COMPLETED = "completed"


class CompletionReason(str, Enum):
    """Terminal outcomes. These are normal results, not errors."""

    EXTINCTION = "extinction"
    POPULATION_CEILING = "population_ceiling"
    GENERATION_LIMIT = "generation_limit"


class GenerationClock:
    """Tracks simulated time, the generation counter and the run state.

    Attributes:
        seconds_per_generation: Time between generation boundaries
        generation: Current generation number
        time_in_generation: Time elapsed since the last boundary
        state: Current ClockState
        completion_reason: Why the run completed (None unless COMPLETED)
    """

    def __init__(self, seconds_per_generation: float = SECONDS_PER_GENERATION):
        require_positive("seconds_per_generation", seconds_per_generation)
        self.seconds_per_generation = float(seconds_per_generation)
        self.generation: int = 0
        self.time_in_generation: float = 0.0
        self.state: ClockState = ClockState.STAGED
        self.completion_reason: Optional[CompletionReason] = None

    @property
    def is_running(self) -> bool:
        return self.state is ClockState.ACTIVE

    @property
    def percent_complete(self) -> float:
        """How far through the current generation the clock is (0.0 to 1.0)."""
        return min(1.0, self.time_in_generation / self.seconds_per_generation)

    def start(self) -> None:
        """Transition STAGED -> ACTIVE.

        Raises:
            ClockStateError: If the clock is not STAGED
        """
        if self.state is not ClockState.STAGED:
            raise ClockStateError(f"cannot start a clock in state {self.state.value}")
        self.state = ClockState.ACTIVE
        logger.info("Generation clock started at generation %d", self.generation)

    def advance(self, dt: float) -> bool:
        """Advance time by ``dt``.

        Only an ACTIVE clock advances. At most one boundary is reported per
        call; surplus time carries over to the next call.

        Returns:
            True if a generation boundary was crossed

        Raises:
            InvalidConfigurationError: If dt is negative
        """
        if dt < 0:
            raise InvalidConfigurationError(f"dt must be non-negative, got {dt}")
        if self.state is not ClockState.ACTIVE:
            return False

        self.time_in_generation += dt
        if self.time_in_generation >= self.seconds_per_generation:
            self.time_in_generation -= self.seconds_per_generation
            return True
        return False

    def increment_generation(self) -> int:
        self.generation += 1
        return self.generation

    def complete(self, reason: CompletionReason) -> None:
        """Transition ACTIVE -> COMPLETED.

        Raises:
            ClockStateError: If the clock is not ACTIVE
        """
        if self.state is not ClockState.ACTIVE:
            raise ClockStateError(f"cannot complete a clock in state {self.state.value}")
        self.state = ClockState.COMPLETED
        self.completion_reason = reason
        logger.info("Simulation completed at generation %d: %s", self.generation, reason.value)

    def reset(self) -> None:
        self.generation = 0
        self.time_in_generation = 0.0
        self.state = ClockState.STAGED
        self.completion_reason = None
