"""Background simulation runner thread."""

import asyncio
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, TypeVar

import orjson

from backend.runner import CommandHandlerMixin
from backend.state_payloads import SimulationSnapshot, history_payload
from natural_selection.config.simulation_config import SimulationConfig, require_positive
from natural_selection.simulation import SimulationController

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TICK_INTERVAL = 0.1


class SimulationRunner(CommandHandlerMixin):
    """Drives a SimulationController in real time from a background thread.

    Every call that touches the controller holds ``self.lock``. After each
    step or command a fresh ``SimulationSnapshot`` is published, so status
    readers never need the lock.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        seed: Optional[int] = None,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        time_scale: float = 1.0,
        controller: Optional[SimulationController] = None,
    ):
        """Initialize the simulation runner.

        Args:
            config: Simulation configuration (defaults if None)
            seed: Optional random seed for deterministic behavior
            tick_interval: Wall-clock seconds between steps
            time_scale: Simulated seconds per wall-clock second
            controller: Pre-built controller (overrides config and seed)
        """
        require_positive("tick_interval", tick_interval)
        require_positive("time_scale", time_scale)
        self.controller = controller or SimulationController(config, seed=seed)
        self.tick_interval = tick_interval
        self.time_scale = time_scale

        self.running = False
        self.thread: Optional[threading.Thread] = None
        self.lock = threading.Lock()

        self._version = 0
        self._snapshot = SimulationSnapshot.capture(self.controller, self._version)

    def _create_error_response(self, error_msg: str) -> Dict[str, Any]:
        """Create a standardized error response."""
        return {"success": False, "error": error_msg}

    def _publish_snapshot(self) -> None:
        """Replace the published snapshot. Caller holds the lock."""
        self._version += 1
        self._snapshot = SimulationSnapshot.capture(self.controller, self._version)

    def start(self) -> None:
        """Start the background stepping thread."""
        if not self.running:
            self.running = True
            self.thread = threading.Thread(target=self._run_loop, daemon=True)
            self.thread.start()
            logger.info("Simulation runner started (tick %.3fs)", self.tick_interval)

    def stop(self) -> None:
        """Stop the background thread."""
        self.running = False
        if self.thread:
            self.thread.join(timeout=2.0)
            self.thread = None
        logger.info("Simulation runner stopped")

    def _run_loop(self) -> None:
        """Main loop: step the controller once per tick."""
        logger.info("Simulation loop: Starting")
        next_tick = time.monotonic()
        dt = self.tick_interval * self.time_scale

        while self.running:
            next_tick += self.tick_interval
            with self.lock:
                if self.controller.clock.is_running:
                    try:
                        self.controller.step(dt)
                    except Exception:
                        logger.exception("Simulation step failed; stopping runner")
                        self.running = False
                    finally:
                        self._publish_snapshot()

            sleep_for = next_tick - time.monotonic()
            if sleep_for > 0:
                time.sleep(sleep_for)
            else:
                # Fell behind; resynchronize rather than burst
                next_tick = time.monotonic()

        logger.info("Simulation loop: Exited")

    def get_state(self) -> SimulationSnapshot:
        """Latest published snapshot (lock-free)."""
        return self._snapshot

    def serialize_state(self) -> bytes:
        return orjson.dumps(self._snapshot.to_dict())

    def read(self, reader: Callable[[SimulationController], T]) -> T:
        """Run ``reader`` against the controller while holding the lock."""
        with self.lock:
            return reader(self.controller)

    def get_history(self) -> List[Dict[str, Any]]:
        return self.read(history_payload)

    def handle_command(self, command: str, data: Optional[Dict[str, Any]] = None):
        """Handle a command from the client.

        Args:
            command: Command type ('start', 'reset', 'step', 'schedule_mutation',
                'cancel_mutation', 'add_bunny', 'set_environment')
            data: Optional command data

        Raises:
            NaturalSelectionError: If the controller rejects the command
        """
        handlers = {
            "start": self._cmd_start,
            "reset": self._cmd_reset,
            "step": self._cmd_step,
            "schedule_mutation": self._cmd_schedule_mutation,
            "cancel_mutation": self._cmd_cancel_mutation,
            "add_bunny": self._cmd_add_bunny,
            "set_environment": self._cmd_set_environment,
        }

        with self.lock:
            handler = handlers.get(command)
            if handler is None:
                logger.warning("Unknown command received: %s", command)
                return self._create_error_response(f"Unknown command: {command}")
            try:
                return handler(data or {})
            finally:
                self._publish_snapshot()

    async def handle_command_async(self, command: str, data: Optional[Dict[str, Any]] = None):
        """Async wrapper to route commands off the event loop thread."""

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.handle_command, command, data)
