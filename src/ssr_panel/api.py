"""FastAPI app exposing the panel simulation engine."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import AppSettings, get_settings
from .engine import SSREngine
from .errors import BackendError
from .models import PanelSimulationOutcome, PanelSimulationRequest

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    engine = getattr(app.state, "engine", None)
    if engine is not None:
        await engine.aclose()


app = FastAPI(title="SSR Panel Engine", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def get_engine(request: Request) -> SSREngine:
    """Return the process-wide engine, building it on first use.

    Runs on the event loop with no await between the check and the
    assignment, so concurrent first requests share one engine.
    """

    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        engine = SSREngine.from_settings(get_settings())
        request.app.state.engine = engine
    return engine


@app.get("/health")
async def health(settings: AppSettings = Depends(get_settings)) -> dict[str, str]:
    return {"status": "ok", "model": settings.generation_model()}


@app.post("/simulate", response_model=PanelSimulationOutcome)
async def simulate(
    request: PanelSimulationRequest,
    http_request: Request,
    engine: SSREngine = Depends(get_engine),
) -> PanelSimulationOutcome:
    def log_progress(current: int, total: int) -> None:
        logger.info("Panel progress %d/%d", current, total)

    try:
        return await engine.simulate_panel(
            request.personas,
            request.questions,
            progress_callback=log_progress,
            # A client that hangs up stops the panel at the next batch boundary.
            cancel_check=http_request.is_disconnected,
            concurrency_limit=request.concurrency_limit,
            product_context=request.product_context,
        )
    except BackendError as exc:
        logger.error("Backend failure during simulation: %s", exc, exc_info=True)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except ValueError as exc:
        logger.error("Simulation error: %s", exc, exc_info=True)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("An unexpected error occurred during simulation.")
        raise HTTPException(status_code=500, detail="Internal server error") from exc


__all__ = ["app", "get_engine"]
