"""Backend runner package.

Provides the command handling logic (start, reset, step, mutations,
add bunny, environment) used by SimulationRunner.
"""

from backend.runner.command_handlers import CommandHandlerMixin

__all__ = ["CommandHandlerMixin"]
