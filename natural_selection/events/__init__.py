"""Events module for domain event dispatch.

Provides the EventBus and the typed lifecycle events the controller
publishes (for example extinction, which the UI shows as a dialog).
"""

from natural_selection.events.domain_events import (
    BunnyAddedEvent,
    GenerationCompletedEvent,
    MutationActivatedEvent,
    SimulationCompletedEvent,
    SimulationResetEvent,
    SimulationStartedEvent,
)
from natural_selection.events.event_bus import EventBus

__all__ = [
    "BunnyAddedEvent",
    "EventBus",
    "GenerationCompletedEvent",
    "MutationActivatedEvent",
    "SimulationCompletedEvent",
    "SimulationResetEvent",
    "SimulationStartedEvent",
]
