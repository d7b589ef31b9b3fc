"""Application factory and context for the natural selection API.

This module provides a factory for creating the FastAPI app without
import-time side effects. Runtime state lives in an AppContext rather than
module-level globals, so each test can build an app around its own runner.

Usage:
------
    # For production (settings from environment)
    app = create_app()

    # For testing (custom runner, no background thread)
    app = create_app(context=AppContext(runner=SimulationRunner(seed=42)), autostart=False)
"""

import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.logging_config import configure_logging
from backend.simulation_runner import DEFAULT_TICK_INTERVAL, SimulationRunner


def _env_seed() -> Optional[int]:
    raw = os.getenv("NATSEL_SEED")
    return int(raw) if raw else None


def _default_runner() -> SimulationRunner:
    return SimulationRunner(
        seed=_env_seed(),
        tick_interval=float(os.getenv("NATSEL_TICK_INTERVAL", str(DEFAULT_TICK_INTERVAL))),
    )


@dataclass
class AppContext:
    """Runtime context holding all application state."""

    runner: SimulationRunner = field(default_factory=_default_runner)

    # Configuration
    production_mode: bool = field(
        default_factory=lambda: os.getenv("PRODUCTION", "false").lower() == "true"
    )
    allowed_origins: list = field(
        default_factory=lambda: os.getenv("ALLOWED_ORIGINS", "*").split(",")
    )
    autostart: bool = field(
        default_factory=lambda: os.getenv("NATSEL_AUTOSTART", "true").lower() == "true"
    )

    # Logging
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("backend"))


def create_app(
    *,
    production_mode: Optional[bool] = None,
    autostart: Optional[bool] = None,
    context: Optional[AppContext] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        production_mode: Override production mode (default: from PRODUCTION env var)
        autostart: Start the runner thread on startup (default: from NATSEL_AUTOSTART)
        context: Pre-configured AppContext (for testing). If None, creates a new one.

    Returns:
        Configured FastAPI application with context attached as app.state.context
    """
    # Configure logging (idempotent)
    logger = configure_logging()

    if context is None:
        context = AppContext()
    if production_mode is not None:
        context.production_mode = production_mode
    if autostart is not None:
        context.autostart = autostart
    context.logger = logger

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown."""
        ctx = app.state.context
        try:
            if ctx.autostart:
                ctx.runner.start()
            ctx.logger.info("LIFESPAN: Startup complete - yielding control to app")
            yield
            ctx.logger.info("LIFESPAN: Received shutdown signal")
        finally:
            ctx.runner.stop()

    app = FastAPI(
        title="Natural Selection Simulation API",
        lifespan=lifespan,
        docs_url=None if context.production_mode else "/docs",
        redoc_url=None if context.production_mode else "/redoc",
    )

    # Attach context to app state for access in routes
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.allowed_origins if context.production_mode else ["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    _setup_routers(app, context)
    return app


def _setup_routers(app: FastAPI, ctx: AppContext) -> None:
    """Setup and include all API routers."""
    from backend.routers import simulation

    app.include_router(simulation.setup_router(ctx.runner))
    ctx.logger.info("API routers configured successfully")
