"""FastAPI application factory for the leakwatch HTTP API."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from leakwatch import __version__
from leakwatch.config import ScannerConfig
from leakwatch.errors import FindingNotFoundError, LeakwatchError
from leakwatch.scanner.engine import ScanEngine
from leakwatch.storage.store import FindingsStore


def create_app(
    config: ScannerConfig | None = None,
    store: FindingsStore | None = None,
    engine: ScanEngine | None = None,
) -> FastAPI:
    """Build and return the FastAPI application."""
    config = config or ScannerConfig.load()
    store = store or FindingsStore(config.database)
    engine = engine or ScanEngine(store, config)

    app = FastAPI(
        title="leakwatch",
        version=__version__,
        docs_url="/api/docs",
    )

    app.state.config = config
    app.state.store = store
    app.state.engine = engine

    from leakwatch.web.api.findings import router as findings_router
    from leakwatch.web.api.scans import router as scans_router

    app.include_router(scans_router, prefix="/api")
    app.include_router(findings_router, prefix="/api")

    @app.exception_handler(FindingNotFoundError)
    async def not_found(request: Request, exc: FindingNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(LeakwatchError)
    async def leakwatch_error(request: Request, exc: LeakwatchError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.on_event("shutdown")
    def shutdown() -> None:
        app.state.store.close()

    return app
