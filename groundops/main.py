"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .config.settings import settings
from .controllers import analytics, crisis, flights, gates, predictions
from .database import dispose_engine, init_models, session_scope
from .errors import GroundOpsError, InternalComputationError
from .infrastructure.persistence import SQLAlchemyRegistry
from .middleware import StructuredLoggingMiddleware, TelemetryMiddleware
from .services.crisis import CrisisEngine
from .services.seed import seed_database
from .utils import utcnow

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Ensure structured middleware logs stream to stdout and file."""

    logging.getLogger().handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )

    log_path = Path(settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=1_000_000,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(file_handler)
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    middleware_logger = logging.getLogger("groundops.middleware.structured")
    middleware_logger.handlers.clear()
    middleware_stdout = logging.StreamHandler(sys.stdout)
    middleware_stdout.setFormatter(logging.Formatter("%(message)s"))
    middleware_logger.addHandler(middleware_stdout)
    middleware_logger.setLevel(logging.INFO)
    middleware_logger.propagate = False

    noisy_loggers = [
        "sqlalchemy.engine",
        "uvicorn.access",
    ]
    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def _validation_field(error: dict) -> str:
    """Wire name of the field a pydantic error points at."""

    names = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    return names[-1] if names else "body"


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        description="Ground operations turnaround estimation and fuel crisis API",
    )
    app.state.crisis_engine = CrisisEngine(
        settings.crisis,
        domestic_penalty_rate=settings.domestic_penalty_rate,
    )

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(StructuredLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.include_router(predictions.router)
    app.include_router(flights.router)
    app.include_router(gates.router)
    app.include_router(crisis.router)
    app.include_router(analytics.router)

    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""

        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
        }

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.exception_handler(GroundOpsError)
    async def ground_ops_exception_handler(request: Request, exc: GroundOpsError):
        if isinstance(exc, InternalComputationError):
            logger.error("Computation failed on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = _validation_field(first)
        return JSONResponse(
            status_code=400,
            content={"message": first.get("msg", "Invalid request"), "field": field},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        await init_models()
        if settings.seed_on_startup:
            async with session_scope() as session:
                await seed_database(
                    SQLAlchemyRegistry(session), utcnow(), settings.domestic_penalty_rate
                )

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        await dispose_engine()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "groundops.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
