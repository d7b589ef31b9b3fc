"""Simulation orchestration."""

from natural_selection.simulation.controller import ProportionsView, SimulationController

__all__ = ["ProportionsView", "SimulationController"]
