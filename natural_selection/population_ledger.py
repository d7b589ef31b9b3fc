"""Population ledger: per-generation start/end counts and bounded history.

Each generation produces one ``GenerationRecord`` holding the counts at the
start of the generation (right after birth) and at its end (after
environmental selection). The ledger enforces strict sequencing:

    record_start(g) -> record_end(g) -> record_start(g + 1) -> ...

Anything else is a controller bug and raises ``OutOfOrderError``.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterator, Optional, Tuple

from natural_selection.bunny_counts import BunnyCounts
from natural_selection.config.simulation import HISTORY_RETENTION
from natural_selection.config.simulation_config import require_positive_int
from natural_selection.exceptions import OutOfOrderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRecord:
    """Start and end counts for one completed generation."""

    generation: int
    start_counts: BunnyCounts
    end_counts: BunnyCounts

    def to_dict(self) -> Dict[str, object]:
        return {
            "generation": self.generation,
            "start_counts": self.start_counts.to_dict(),
            "end_counts": self.end_counts.to_dict(),
        }


class GenerationHistory:
    """Lazy, restartable view over a snapshot of generation records.

    Iterating twice yields the same records; later ledger writes do not
    affect a view that was already taken.
    """

    __slots__ = ("_records",)

    def __init__(self, records: Tuple[GenerationRecord, ...]):
        self._records = records

    def __iter__(self) -> Iterator[GenerationRecord]:
        for record in self._records:
            yield record

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    @property
    def first_generation(self) -> Optional[int]:
        return self._records[0].generation if self._records else None

    @property
    def last_generation(self) -> Optional[int]:
        return self._records[-1].generation if self._records else None


class PopulationLedger:
    """Records generation counts in strict order and keeps bounded history.

    Attributes:
        retention_limit: Maximum number of records kept; oldest are evicted
        expected_generation: Generation the next ``record_start`` must be for
    """

    def __init__(
        self,
        retention_limit: int = HISTORY_RETENTION,
        live_counts_provider: Optional[Callable[[], BunnyCounts]] = None,
    ):
        """Initialize the ledger.

        Args:
            retention_limit: Maximum number of generation records to keep
            live_counts_provider: Computes counts of the current live population
        """
        require_positive_int("history_retention", retention_limit)
        self.retention_limit = retention_limit
        self._get_live_counts = live_counts_provider or BunnyCounts.with_zero
        self._records: Deque[GenerationRecord] = deque(maxlen=retention_limit)
        self._open_start: Optional[Tuple[int, BunnyCounts]] = None
        self.expected_generation: int = 0
        self.evicted_count: int = 0

    @property
    def current_start_counts(self) -> Optional[BunnyCounts]:
        """Start counts of the generation currently open, if any."""
        return self._open_start[1] if self._open_start is not None else None

    def record_start(self, generation: int, counts: BunnyCounts) -> None:
        """Record counts at the start of ``generation``.

        Raises:
            OutOfOrderError: Unless ``generation`` is the expected generation
                and no start is already open
        """
        if self._open_start is not None:
            raise OutOfOrderError(
                f"start of generation {generation} recorded while generation "
                f"{self._open_start[0]} is still open"
            )
        if generation != self.expected_generation:
            raise OutOfOrderError(
                f"start recorded for generation {generation}, expected {self.expected_generation}"
            )
        self._open_start = (generation, counts)

    def record_end(self, generation: int, counts: BunnyCounts) -> GenerationRecord:
        """Record counts at the end of ``generation`` and close it.

        Returns:
            The completed generation record

        Raises:
            OutOfOrderError: Unless ``generation`` is the open generation
        """
        if self._open_start is None or self._open_start[0] != generation:
            open_generation = self._open_start[0] if self._open_start is not None else None
            raise OutOfOrderError(
                f"end recorded for generation {generation}, open generation is {open_generation}"
            )

        record = GenerationRecord(generation, self._open_start[1], counts)
        if len(self._records) == self.retention_limit:
            self.evicted_count += 1
            logger.debug("Ledger: evicting generation %d", self._records[0].generation)
        self._records.append(record)
        self._open_start = None
        self.expected_generation = generation + 1
        return record

    def history(self) -> GenerationHistory:
        """Retained records in increasing generation order."""
        return GenerationHistory(tuple(self._records))

    def record_for(self, generation: int) -> Optional[GenerationRecord]:
        """Retained record for ``generation``, or None if evicted or not yet complete."""
        if not self._records:
            return None
        index = generation - self._records[0].generation
        if 0 <= index < len(self._records):
            return self._records[index]
        return None

    def live_counts(self) -> BunnyCounts:
        """Counts computed from the current live population (not from history)."""
        return self._get_live_counts()

    def clear(self) -> None:
        self._records.clear()
        self._open_start = None
        self.expected_generation = 0
        self.evicted_count = 0

    def __len__(self) -> int:
        return len(self._records)
