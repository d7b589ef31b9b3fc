"""Simulation entities."""

from natural_selection.entities.bunny import Bunny, DeathCause

__all__ = ["Bunny", "DeathCause"]
