from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from pydantic import BaseModel

from gateway.core.capability_guard import GuardOutcome
from gateway.core.observability import get_logger

logger = get_logger('server')


# =========================
# API models
# =========================

class HealthResponse(BaseModel):
    status: str


class StartupStatus(BaseModel):
    outcome: str
    warning: Optional[str] = None


# =========================
# FastAPI app
# =========================

def create_app(outcome: GuardOutcome) -> FastAPI:
    """
    Build the gateway application.

    Only the bootstrap sequencer should call this, after the capability
    guard has run.
    """
    app = FastAPI(title="Gateway")
    app.state.startup_outcome = outcome

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(status="ok")

    @app.get("/api/startup", response_model=StartupStatus)
    def startup_status(request: Request):
        recorded = request.app.state.startup_outcome
        return StartupStatus(outcome=recorded.kind.value, warning=recorded.message)

    logger.info("Gateway application constructed")
    return app
