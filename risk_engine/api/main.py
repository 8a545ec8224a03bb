"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from risk_engine.api.middleware import RequestIDMiddleware, MetricsMiddleware
from risk_engine.api.v1 import applications, assessments, statistics
from risk_engine.infrastructure.database.session import create_tables
from risk_engine.infrastructure.observability.logging import setup_logging
from risk_engine.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        create_tables()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Internal Risk Engine",
        description="Loan risk scoring, underwriting recommendations and assessment statistics",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(assessments.router, prefix="/v1", tags=["risk-assessment"])
    app.include_router(statistics.router, prefix="/v1", tags=["statistics"])
    app.include_router(applications.router, prefix="/v1", tags=["loan-applications"])

    return app


app = create_app()
