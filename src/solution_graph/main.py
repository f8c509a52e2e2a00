"""Solution Graph Service FastAPI application.

- Structured logging and tracing initialised before the app is created
- Content-service and repository errors mapped to JSON error responses
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from solution_graph import __version__
from solution_graph.api.routers.graph import router as graph_router
from solution_graph.configuration.common_config import SERVICE_NAME, get_app_settings
from solution_graph.configuration.logging_config import configure_logging
from solution_graph.errors import ContentServiceError, InvalidRepositoryError
from solution_graph.observability.tracing import init_tracing

# Initialize logging before creating the app
configure_logging(get_app_settings().LOG_LEVEL)
logger = structlog.get_logger(__name__)
init_tracing(SERVICE_NAME)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Solution Graph Service",
        description="Classifies Sentinel solution artifacts and links them into a dependency graph",
        version=__version__,
    )

    @app.exception_handler(ContentServiceError)
    async def content_service_error_handler(request: Request, exc: ContentServiceError) -> JSONResponse:
        logger.error(
            "content_service.error",
            stage=exc.stage,
            status_code=exc.status_code,
            message=exc.message,
            path=request.url.path,
        )
        return JSONResponse(status_code=502, content=exc.to_dict())

    @app.exception_handler(InvalidRepositoryError)
    async def invalid_repository_handler(request: Request, exc: InvalidRepositoryError) -> JSONResponse:
        logger.warning("request.invalid_repository", message=str(exc), path=request.url.path)
        return JSONResponse(status_code=400, content={"status": "error", "detail": str(exc)})

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    app.include_router(graph_router)
    return app


app: FastAPI = create_app()


def serve_api() -> None:
    import uvicorn

    settings = get_app_settings()
    uvicorn.run(app, host="0.0.0.0", port=settings.API_PORT)


if __name__ == "__main__":
    serve_api()
