"""Environmental selection: predation, starvation and tough food.

Selection emerges from the environment. Each factor can be switched on or
off independently and is a no-op while disabled.
"""

from natural_selection.selection.engine import SelectionEngine, SelectionResult
from natural_selection.selection.predation import (
    CamouflageClassifier,
    fur_phenotype_classifier,
    predation_kill_count,
)
from natural_selection.selection.sampling import weighted_sample

__all__ = [
    "CamouflageClassifier",
    "SelectionEngine",
    "SelectionResult",
    "fur_phenotype_classifier",
    "predation_kill_count",
    "weighted_sample",
]
