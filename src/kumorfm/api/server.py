"""FastAPI server for kumorfm."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kumorfm import __version__
from kumorfm.api.routes import graph, health, pql, predict
from kumorfm.core.errors import APIError, RFMError
from kumorfm.utils.config import Config, get_config
from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown."""
    logger.info("Starting kumorfm API server")
    yield
    logger.info("Shutting down kumorfm API server")


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config: Optional config (uses global config if None)

    Returns:
        Configured FastAPI app
    """
    config = config or get_config()

    app = FastAPI(
        title="kumorfm API",
        description="Graph metadata inference, validation and PQL building",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get("api.cors_origins", ["*"]),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        logger.error(f"Prediction service error: {exc}")
        return JSONResponse(status_code=502, content=exc.to_dict())

    @app.exception_handler(RFMError)
    async def rfm_error_handler(request: Request, exc: RFMError):
        logger.info(f"Rejected request: {exc.code}: {exc}")
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
                "detail": str(exc),
            },
        )

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "kumorfm API",
            "version": __version__,
            "endpoints": {
                "health": "/health",
                "graph_build": "/api/v1/graph/build",
                "graph_validate": "/api/v1/graph/validate",
                "pql_build": "/api/v1/pql/build",
                "predict": "/api/v1/predict",
                "docs": "/docs",
            },
        }

    app.include_router(health.router)
    app.include_router(graph.router)
    app.include_router(pql.router)
    app.include_router(predict.router)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "kumorfm.api.server:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
