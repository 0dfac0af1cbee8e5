from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.errors import register_error_handlers
from app.api.routers import documents, health
from app.config.settings import Settings
from app.database.connection import close_pool, init_pool
from app.database.schema import ensure_schema
from app.logging.logger import Log
from app.orchestrator.orchestrator import DocumentOrchestrator, build_orchestrator


def create_app(
    settings: Settings | None = None,
    orchestrator: DocumentOrchestrator | None = None,
) -> FastAPI:
    """Build the HTTP application.

    With no *orchestrator* given, startup opens the database pool, creates
    missing tables and wires every adapter from *settings*.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.orchestrator is not None:
            yield
            return
        init_pool(settings)
        try:
            ensure_schema()
            app.state.orchestrator = build_orchestrator(settings)
            Log.info(f"Document service ready ({settings.app_env})")
            yield
        finally:
            close_pool()

    app = FastAPI(title="Document Insight", lifespan=lifespan)
    app.state.settings = settings
    app.state.orchestrator = orchestrator
    app.include_router(documents.router)
    app.include_router(health.router)
    register_error_handlers(app)
    return app
