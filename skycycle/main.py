"""
HTTP API for the environment simulation.

IMPORTANT:
- Must run with ONE worker (the simulation lives in this process)

    uvicorn skycycle.main:app
"""

from fastapi import FastAPI, HTTPException, APIRouter, Query
from pydantic import BaseModel, Field
from contextlib import asynccontextmanager
from typing import Optional

from skycycle.config import LOG_LEVEL, load_simulation_config
from skycycle.events import EventKind
from skycycle.lighting import compute_lighting_profile, period_for
from skycycle.logger import logger
from skycycle.simulation import EnvironmentSimulation


# ============================================================================
# Simulation initialization
# ============================================================================

# Invalid configuration is fatal here, before any loop starts
try:
    simulation_config = load_simulation_config()
except ValueError:
    logger.error("Invalid simulation configuration", exc_info=True)
    raise

simulation = EnvironmentSimulation(simulation_config)


# ============================================================================
# FastAPI Lifespan (simulation loops)
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.

    Starts the day/night and weather loops on startup.
    Stops them and releases renderer resources on shutdown.
    """
    logger.info("SkyCycle starting up")
    logger.info(f"Configuration: {simulation_config.dict()}, LOG_LEVEL={LOG_LEVEL}")

    simulation.start()

    # App is running
    yield

    logger.info("Starting graceful shutdown...")
    simulation.stop()
    logger.info("Shutdown complete")


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="SkyCycle API",
    lifespan=lifespan,
    redoc_url=None,
    docs_url="/docs"
)

environment_router = APIRouter(
    prefix="/environment",
    tags=["Environment"]
)


# ------------------------------------------------------------------

class StormRequest(BaseModel):
    duration: Optional[float] = Field(None, gt=0, description="Storm length in seconds (default: configured duration)")


# ------------------------------------------------------------------
# State
# ------------------------------------------------------------------

@environment_router.get("/state")
async def get_state():
    """
    Get current environment state.

    Useful for:
    - Debugging
    - UI state updates
    """
    try:
        return simulation.get_status()
    except Exception as e:
        logger.error("Failed to get state", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@environment_router.get("/lighting")
async def get_lighting(
    time_of_day: Optional[float] = Query(None, ge=0, lt=24, description="Preview hour (0-24); omit for current")
):
    """
    Get the current lighting profile, or preview the profile for any hour.
    """
    try:
        if time_of_day is None:
            snapshot = simulation.state.get_snapshot()
            time_of_day = snapshot["time_of_day"]

        profile = compute_lighting_profile(time_of_day)
        return {
            "time_of_day": time_of_day,
            "period": period_for(time_of_day),
            **profile.to_dict(),
        }
    except Exception as e:
        logger.error("Failed to compute lighting profile", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@environment_router.get("/events")
async def get_events(
    limit: int = Query(50, ge=1, le=1000, description="Maximum number of events"),
    kind: Optional[EventKind] = Query(None, description="Only events of this kind"),
):
    """Recent storm, thunder and phase-change notifications, oldest first."""
    events = simulation.events.recent(limit=limit, kind=kind)
    return {"count": len(events), "events": [event.to_dict() for event in events]}


# ------------------------------------------------------------------
# Weather
# ------------------------------------------------------------------

@environment_router.post("/storm")
async def request_storm(req: StormRequest):
    """
    Queue a storm for the next weather check.

    The storm still waits for daytime and for any running storm to end.
    """
    try:
        simulation.weather.request_storm(req.duration)
        return {
            "message": "Storm requested",
            "duration": req.duration or simulation_config.storm_duration,
            "next_check_in": simulation_config.weather_check_interval,
            "storm_active": simulation.state.get_snapshot()["is_storm"],
        }
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to request storm", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@environment_router.get("/config")
async def get_config():
    """Effective simulation configuration."""
    return simulation_config.dict()


# ============================================================================
# Register Routers
# ============================================================================

app.include_router(environment_router)
