"""Simulation API endpoints.

Endpoints:
    GET    /api/simulation
    POST   /api/simulation/start
    POST   /api/simulation/reset
    POST   /api/simulation/step
    POST   /api/simulation/mutations
    DELETE /api/simulation/mutations/{gene}
    POST   /api/simulation/bunnies
    PUT    /api/simulation/environment
    GET    /api/simulation/history
    GET    /api/simulation/proportions/{generation}
    GET    /api/simulation/bunnies/{bunny_id}/pedigree
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response

from backend.models import AddBunnyRequest, EnvironmentRequest, MutationRequest, StepRequest
from backend.simulation_runner import SimulationRunner
from natural_selection.config.simulation_config import require_pedigree_depth
from natural_selection.exceptions import (
    AlreadyMutatedError,
    ClockStateError,
    InvalidConfigurationError,
    LifecycleError,
    NaturalSelectionError,
    OutOfOrderError,
)

logger = logging.getLogger(__name__)

# Errors caused by the state of the run rather than by the request itself
_CONFLICT_ERRORS = (AlreadyMutatedError, ClockStateError, LifecycleError, OutOfOrderError)


def _error_response(exc: NaturalSelectionError) -> JSONResponse:
    status_code = 409 if isinstance(exc, _CONFLICT_ERRORS) else 400
    return JSONResponse({"error": str(exc)}, status_code=status_code)


def setup_router(runner: SimulationRunner) -> APIRouter:
    """Create the simulation router bound to ``runner``."""
    router = APIRouter(prefix="/api/simulation", tags=["simulation"])

    async def run_command(command: str, data: Optional[Dict[str, Any]] = None) -> Response:
        try:
            result = await runner.handle_command_async(command, data)
        except NaturalSelectionError as exc:
            logger.info("Command %s rejected: %s", command, exc)
            return _error_response(exc)
        return JSONResponse(result)

    @router.get("")
    async def get_simulation():
        """Latest status snapshot."""
        return Response(content=runner.serialize_state(), media_type="application/json")

    @router.post("/start")
    async def start_simulation():
        return await run_command("start")

    @router.post("/reset")
    async def reset_simulation():
        return await run_command("reset")

    @router.post("/step")
    async def step_simulation(request: StepRequest):
        return await run_command("step", {"dt": request.dt})

    @router.post("/mutations")
    async def schedule_mutation(request: MutationRequest):
        return await run_command("schedule_mutation", request.model_dump())

    @router.delete("/mutations/{gene}")
    async def cancel_mutation(gene: str):
        result = await runner.handle_command_async("cancel_mutation", {"gene": gene})
        if not result["success"]:
            return JSONResponse(
                {"error": f"No mutation scheduled for gene: {gene}"}, status_code=404
            )
        return JSONResponse(result)

    @router.post("/bunnies")
    async def add_bunny(request: AddBunnyRequest):
        return await run_command("add_bunny", request.model_dump())

    @router.put("/environment")
    async def set_environment(request: EnvironmentRequest):
        return await run_command("set_environment", request.model_dump(exclude_none=True))

    @router.get("/history")
    async def get_history():
        return JSONResponse({"records": runner.get_history()})

    @router.get("/proportions/{generation}")
    async def get_proportions(generation: int):
        def read(controller):
            view = controller.proportions(generation)
            if view is None:
                return None
            return {
                "generation": view.generation,
                "is_current": view.is_current,
                "start_counts": view.start_counts.to_dict(),
                "end_counts": view.end_counts.to_dict(),
            }

        payload = runner.read(read)
        if payload is None:
            return JSONResponse(
                {"error": f"No data retained for generation {generation}"}, status_code=404
            )
        return JSONResponse(payload)

    @router.get("/bunnies/{bunny_id}/pedigree")
    async def get_pedigree(bunny_id: int, depth: Optional[int] = None):
        def read(controller):
            try:
                bunny = controller.get_bunny(bunny_id)
            except KeyError:
                return None
            return controller.pedigree(bunny, depth).to_dict(controller.gene_pool)

        if depth is not None:
            try:
                require_pedigree_depth("depth", depth)
            except InvalidConfigurationError as exc:
                return _error_response(exc)
        payload = runner.read(read)
        if payload is None:
            return JSONResponse({"error": f"Bunny not found: {bunny_id}"}, status_code=404)
        return JSONResponse(payload)

    return router
