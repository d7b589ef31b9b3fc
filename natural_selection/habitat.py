"""Habitats the bunnies can live in."""

from enum import Enum

from natural_selection.genetics.allele import BROWN_FUR, WHITE_FUR, Allele


class Habitat(str, Enum):
    """The environment's appearance, which decides which fur color is camouflaged."""

    EQUATOR = "equator"
    ARCTIC = "arctic"

    @property
    def camouflage_allele(self) -> Allele:
        """Fur color that blends into this habitat."""
        return WHITE_FUR if self is Habitat.ARCTIC else BROWN_FUR
