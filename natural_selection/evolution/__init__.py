"""Evolution: inheritance between generations and scheduled mutations.

There is no fitness function here. Selection pressure comes from the
environment (see ``natural_selection.selection``); this package only decides
what offspring inherit.
"""

from natural_selection.evolution.inheritance import (
    InheritanceEngine,
    PendingMutation,
    mutation_birth_count,
)
from natural_selection.evolution.mutation import MutationScheduler

__all__ = [
    "InheritanceEngine",
    "MutationScheduler",
    "PendingMutation",
    "mutation_birth_count",
]
