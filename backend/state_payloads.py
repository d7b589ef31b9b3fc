"""Immutable snapshots of simulation state for API readers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import orjson

from natural_selection.simulation import SimulationController


def _compact_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of *data* with None values removed."""
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class SimulationSnapshot:
    """Point-in-time view of a controller, safe to share across threads.

    Built under the runner lock after every step or command; readers use it
    without taking the lock.
    """

    run_id: str
    version: int
    state: str
    generation: int
    percent_complete: float
    live_count: int
    total_births: int
    habitat: str
    wolves: bool
    limited_food: bool
    tough_food: bool
    live_counts: Dict[str, int]
    dominance: Dict[str, Optional[str]]
    pending_mutations: Dict[str, float]
    completion_reason: Optional[str] = None
    latest_record: Optional[Dict[str, Any]] = None

    @classmethod
    def capture(cls, controller: SimulationController, version: int) -> "SimulationSnapshot":
        """Build a snapshot from the controller's current state.

        Must be called while holding the lock that guards ``controller``.
        """
        stats = controller.get_stats()
        last_generation = controller.history().last_generation
        latest = None
        if last_generation is not None:
            latest = controller.ledger.record_for(last_generation).to_dict()
        return cls(
            run_id=stats["run_id"],
            version=version,
            state=stats["state"],
            generation=stats["generation"],
            percent_complete=stats["percent_complete"],
            live_count=stats["live_count"],
            total_births=stats["total_births"],
            habitat=stats["habitat"],
            wolves=stats["wolves"],
            limited_food=stats["limited_food"],
            tough_food=stats["tough_food"],
            live_counts=stats["live_counts"],
            dominance=stats["dominance"],
            pending_mutations=stats["pending_mutations"],
            completion_reason=stats["completion_reason"],
            latest_record=latest,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "run_id": self.run_id,
            "version": self.version,
            "state": self.state,
            "generation": self.generation,
            "percent_complete": round(self.percent_complete, 4),
            "live_count": self.live_count,
            "total_births": self.total_births,
            "habitat": self.habitat,
            "environment": {
                "wolves": self.wolves,
                "limited_food": self.limited_food,
                "tough_food": self.tough_food,
            },
            "live_counts": self.live_counts,
            "dominance": self.dominance,
            "pending_mutations": self.pending_mutations,
            "completion_reason": self.completion_reason,
            "latest_record": self.latest_record,
        }
        return _compact_dict(data)

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())


def history_payload(controller: SimulationController) -> List[Dict[str, Any]]:
    return [record.to_dict() for record in controller.history()]
