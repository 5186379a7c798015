"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse

from meal_dashboard.api.models import ManualSubmitRequest, ManualSubmitResponse
from meal_dashboard.api.page import render_dashboard
from meal_dashboard.app_logging import configure_logging
from meal_dashboard.containers import AppContainer
from meal_dashboard.services.dashboard import SubmitStatus

_SUBMIT_STATUS_CODES = {
    SubmitStatus.INVALID: status.HTTP_400_BAD_REQUEST,
    SubmitStatus.BUSY: status.HTTP_409_CONFLICT,
    SubmitStatus.FAILED: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer, start_scheduler: bool = True) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if start_scheduler:
            try:
                await app.state.container.scheduler.start()
            except Exception:
                logger.exception("Failed to start dashboard scheduler")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def dashboard_page(request: Request) -> HTMLResponse:
        """Render the dashboard page from the current view state."""
        state_container: AppContainer = request.app.state.container
        return HTMLResponse(
            render_dashboard(
                state_container.view.snapshot(),
                state_container.dashboard_service.devices,
            )
        )

    @app.get("/api/dashboard")
    async def dashboard_snapshot(request: Request) -> dict[str, object]:
        """Return bindings, card order and the latest aggregate."""
        state_container: AppContainer = request.app.state.container
        latest = state_container.dashboard_service.latest
        return {
            "view": state_container.view.snapshot(),
            "aggregate": latest.to_dict() if latest else None,
        }

    @app.post("/api/refresh")
    async def refresh(request: Request) -> dict[str, object]:
        """Run a refresh cycle now."""
        state_container: AppContainer = request.app.state.container
        aggregate = await state_container.dashboard_service.refresh()
        return {"aggregate": aggregate.to_dict()}

    @app.post("/api/manual")
    async def submit_manual(
        payload: ManualSubmitRequest, request: Request
    ) -> ManualSubmitResponse:
        """Store a manual override for one device and meal period."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.dashboard_service.submit_manual(
            payload.period, payload.device, payload.value
        )
        if not result.ok:
            raise HTTPException(
                status_code=_SUBMIT_STATUS_CODES[result.status],
                detail=result.message,
            )
        return ManualSubmitResponse(
            ok=True, status=str(result.status), message=result.message
        )

    return app
