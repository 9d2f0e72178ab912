"""FastAPI application entrypoint."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api import orchestrations
from .config import get_settings
from .domain.errors import InvalidInputError
from .observability.logging_config import configure_logging
from .observability.otel import configure_telemetry


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Specialist Orchestrator",
        version="0.1.0",
        docs_url="/docs",
        redoc_url=None,
    )

    configure_logging(settings)
    configure_telemetry(settings)

    @app.exception_handler(InvalidInputError)
    async def _invalid_input_handler(request: Request, exc: InvalidInputError):
        return JSONResponse(
            status_code=422,
            content={
                "error": "InvalidInput",
                "message": str(exc),
                "remediation": f"Describe the project in at least {exc.min_length} characters",
            },
        )

    @app.exception_handler(Exception)
    async def _generic_exception_handler(request: Request, exc: Exception):  # pragma: no cover - fallback
        return JSONResponse(
            status_code=500,
            content={
                "error": "InternalServerError",
                "message": str(exc),
                "remediation": "Check the service logs and the registry override document",
            },
        )

    app.include_router(orchestrations.router)

    @app.get("/healthz")
    async def healthcheck():
        return {"status": "ok", "environment": settings.environment}

    return app


app = create_app()


__all__ = ["app", "create_app"]
